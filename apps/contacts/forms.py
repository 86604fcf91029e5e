from django import forms

from apps.customfields.forms import CustomFieldsFormMixin
from apps.customfields.models import OBJECT_TYPE_COMPANY, OBJECT_TYPE_CONTACT
from .models import Contact, Company


def blank_to_none(value):
    """Empty optional strings are stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class ContactForm(CustomFieldsFormMixin, forms.ModelForm):

    custom_field_object_type = OBJECT_TYPE_CONTACT

    class Meta:
        model = Contact
        fields = ['first_name', 'last_name', 'email', 'phone', 'tags']

        widgets = {
            'first_name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'last_name': forms.TextInput(attrs={'class': 'form-control'}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'name@example.com'}),
            'phone': forms.TextInput(attrs={'class': 'form-control', 'placeholder': '+1 555 0100'}),
            'tags': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'vip, newsletter'}),
        }

        error_messages = {
            'first_name': {'required': 'First name is required'},
            'last_name': {'required': 'Last name is required'},
        }

    def __init__(self, *args, **kwargs):
        tenant = kwargs.pop('tenant', None)
        super().__init__(*args, **kwargs)
        self.add_custom_fields(tenant)

    def clean_email(self):
        email = blank_to_none(self.cleaned_data.get('email'))
        return email.lower() if email else None

    def clean_phone(self):
        return blank_to_none(self.cleaned_data.get('phone'))


class CompanyForm(CustomFieldsFormMixin, forms.ModelForm):

    custom_field_object_type = OBJECT_TYPE_COMPANY

    class Meta:
        model = Company
        fields = ['name', 'website', 'phone']

        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'website': forms.URLInput(attrs={'class': 'form-control', 'placeholder': 'https://'}),
            'phone': forms.TextInput(attrs={'class': 'form-control'}),
        }

        error_messages = {
            'name': {'required': 'Company name is required'},
        }

    def __init__(self, *args, **kwargs):
        tenant = kwargs.pop('tenant', None)
        super().__init__(*args, **kwargs)
        self.add_custom_fields(tenant)

    def clean_website(self):
        return blank_to_none(self.cleaned_data.get('website'))

    def clean_phone(self):
        return blank_to_none(self.cleaned_data.get('phone'))
