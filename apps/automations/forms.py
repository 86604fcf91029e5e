from django import forms

from .engine import TEMPLATE_VARIABLES
from .models import AutomationTemplate


class AutomationTemplateForm(forms.ModelForm):

    class Meta:
        model = AutomationTemplate
        fields = ['name', 'message_template', 'send_to', 'custom_email', 'enabled']

        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'message_template': forms.Textarea(attrs={'class': 'form-control', 'rows': 8}),
            'send_to': forms.Select(attrs={'class': 'form-select'}),
            'custom_email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'team@example.com'}),
            'enabled': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
        }

        labels = {
            'message_template': 'Message',
        }

        error_messages = {
            'name': {'required': 'Name is required'},
            'message_template': {'required': 'Message is required'},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['message_template'].help_text = 'Available placeholders: ' + ', '.join(
            '{%s}' % name for name in TEMPLATE_VARIABLES
        )

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise forms.ValidationError('Name is required')
        return name

    def clean_custom_email(self):
        email = (self.cleaned_data.get('custom_email') or '').strip().lower()
        return email or None

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('send_to') != AutomationTemplate.SEND_TO_CUSTOM:
            cleaned_data['custom_email'] = None
        return cleaned_data
