from decimal import Decimal

from django import forms

from apps.contacts.models import Contact, Company
from apps.customfields.forms import CustomFieldsFormMixin
from apps.customfields.models import OBJECT_TYPE_DEAL
from apps.pipeline.models import Stage
from .models import Deal


class DealForm(CustomFieldsFormMixin, forms.ModelForm):
    """
    Deal create/edit form.

    The value is typed in dollars and stored as cents. The stage is not
    written by save(): views route stage changes through the automation
    engine (see cleaned_data['stage']).
    """

    custom_field_object_type = OBJECT_TYPE_DEAL

    value = forms.DecimalField(
        label='Value ($)',
        min_value=Decimal('0'),
        max_digits=14,
        decimal_places=2,
        initial=Decimal('0'),
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01', 'min': '0'}),
    )

    stage = forms.ModelChoiceField(
        queryset=Stage.objects.none(),
        empty_label=None,
        widget=forms.Select(attrs={'class': 'form-select'}),
    )

    class Meta:
        model = Deal
        fields = ['title', 'contact', 'company']

        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'company': forms.Select(attrs={'class': 'form-select'}),
        }

        error_messages = {
            'title': {'required': 'Title is required'},
        }

    def __init__(self, *args, **kwargs):
        tenant = kwargs.pop('tenant', None)
        pipeline = kwargs.pop('pipeline', None)
        super().__init__(*args, **kwargs)

        if self.instance.pk:
            pipeline = self.instance.pipeline
            self.fields['value'].initial = Decimal(self.instance.value_cents) / 100
            self.fields['stage'].initial = self.instance.stage_id

        if pipeline is not None:
            self.fields['stage'].queryset = pipeline.stages.order_by('position')

        self.fields['contact'].queryset = Contact.objects.filter(tenant=tenant).order_by('first_name', 'last_name')
        self.fields['company'].queryset = Company.objects.filter(tenant=tenant).order_by('name')
        self.fields['contact'].required = False
        self.fields['company'].required = False

        self.add_custom_fields(tenant)

    def clean_title(self):
        title = self.cleaned_data['title'].strip()
        if not title:
            raise forms.ValidationError('Title is required')
        return title

    def save(self, commit=True):
        deal = super().save(commit=False)
        deal.value_cents = int((self.cleaned_data['value'] * 100).to_integral_value())
        if commit:
            deal.save()
        return deal


class DealFilterForm(forms.Form):

    search = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Search deals...'}),
    )
    stage = forms.ModelChoiceField(
        queryset=Stage.objects.none(),
        required=False,
        empty_label='All stages',
        widget=forms.Select(attrs={'class': 'form-select'}),
    )

    def __init__(self, *args, **kwargs):
        tenant = kwargs.pop('tenant', None)
        super().__init__(*args, **kwargs)
        self.fields['stage'].queryset = Stage.objects.filter(pipeline__tenant=tenant).order_by('position')
