from django import forms

from apps.accounts.models import User
from apps.pipeline.models import Stage


class DealExportForm(forms.Form):

    FORMAT_CHOICES = [
        ('csv', 'CSV'),
        ('excel', 'Excel'),
    ]

    format = forms.ChoiceField(choices=FORMAT_CHOICES, initial='csv', required=False, widget=forms.Select(attrs={'class': 'form-select'}))
    start_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    end_date = forms.DateField(required=False, widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    owner = forms.ModelChoiceField(queryset=User.objects.none(), required=False, empty_label='All owners', widget=forms.Select(attrs={'class': 'form-select'}))
    stage = forms.ModelChoiceField(queryset=Stage.objects.none(), required=False, empty_label='All stages', widget=forms.Select(attrs={'class': 'form-select'}))

    def __init__(self, *args, **kwargs):
        tenant = kwargs.pop('tenant', None)
        user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)

        self.fields['stage'].queryset = Stage.objects.filter(pipeline__tenant=tenant).order_by('position')
        if user is not None and user.is_admin():
            self.fields['owner'].queryset = User.objects.filter(tenant=tenant).order_by('first_name')
        else:
            del self.fields['owner']

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise forms.ValidationError('Start date must be before end date')
        return cleaned_data
