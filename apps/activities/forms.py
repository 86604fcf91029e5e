from django import forms
from django.db.models import Q

from apps.accounts.models import User
from apps.automations.models import AutomationTemplate
from apps.contacts.models import Contact
from apps.deals.models import Deal
from .models import Activity


class ActivityForm(forms.ModelForm):
    """
    Base form for notes, calls and tasks.

    Subclasses set activity_type and their Meta.fields; the view sets
    tenant, type and created_by before saving.
    """

    activity_type = None

    class Meta:
        model = Activity
        fields = ['body', 'deal', 'contact']

        widgets = {
            'body': forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'autofocus': True}),
            'deal': forms.Select(attrs={'class': 'form-select'}),
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'due_at': forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'}, format='%Y-%m-%dT%H:%M'),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'assigned_user': forms.Select(attrs={'class': 'form-select'}),
            'template': forms.Select(attrs={'class': 'form-select'}),
        }

        error_messages = {
            'body': {'required': 'Body is required'},
        }

    def __init__(self, *args, **kwargs):
        tenant = kwargs.pop('tenant', None)
        super().__init__(*args, **kwargs)

        self.fields['deal'].queryset = Deal.objects.filter(tenant=tenant).order_by('title')
        self.fields['contact'].queryset = Contact.objects.filter(tenant=tenant).order_by('first_name', 'last_name')

        if 'due_at' in self.fields:
            self.fields['due_at'].input_formats = ['%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M', '%Y-%m-%d']
        if 'assigned_user' in self.fields:
            self.fields['assigned_user'].queryset = User.objects.filter(tenant=tenant, is_active=True).order_by('first_name')
            self.fields['assigned_user'].empty_label = 'Me'
        if 'template' in self.fields:
            # A disabled template stays selectable on the task that already uses it
            self.fields['template'].queryset = AutomationTemplate.objects.filter(
                Q(enabled=True) | Q(pk=self.instance.template_id),
                tenant=tenant,
            ).order_by('name')
            self.fields['template'].empty_label = 'No automation'

    def clean_body(self):
        body = self.cleaned_data['body'].strip()
        if not body:
            raise forms.ValidationError('Body is required')
        return body


class NoteForm(ActivityForm):

    activity_type = Activity.TYPE_NOTE


class CallForm(ActivityForm):

    activity_type = Activity.TYPE_CALL

    class Meta(ActivityForm.Meta):
        fields = ['body', 'due_at', 'deal', 'contact']
        labels = {'due_at': 'Scheduled for'}


class TaskForm(ActivityForm):

    activity_type = Activity.TYPE_TASK

    class Meta(ActivityForm.Meta):
        fields = ['body', 'due_at', 'status', 'assigned_user', 'template', 'deal', 'contact']
        labels = {
            'body': 'Task',
            'due_at': 'Due date',
            'template': 'Email when done',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = True
        self.fields['status'].choices = Activity.STATUS_CHOICES
        if not self.instance.pk:
            self.fields['status'].initial = Activity.STATUS_TODO


ACTIVITY_FORMS = {
    Activity.TYPE_NOTE: NoteForm,
    Activity.TYPE_CALL: CallForm,
    Activity.TYPE_TASK: TaskForm,
}
