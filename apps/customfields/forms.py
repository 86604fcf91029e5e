import datetime

from django import forms
from django.core.exceptions import ValidationError

from .models import CustomField, OBJECT_TYPE_CHOICES, key_validator
from .services import get_fields, get_values, save_custom_field_values


def build_form_field(custom_field, initial=None):
    """Django form field for a tenant-defined CustomField."""
    common = {
        'label': custom_field.label,
        'required': custom_field.required,
    }

    if custom_field.field_type == CustomField.FIELD_NUMBER:
        return forms.FloatField(initial=initial, widget=forms.NumberInput(attrs={'class': 'form-control', 'step': 'any'}), **common)

    if custom_field.field_type == CustomField.FIELD_DATE:
        if isinstance(initial, str):
            try:
                initial = datetime.date.fromisoformat(initial)
            except ValueError:
                initial = None
        return forms.DateField(initial=initial, widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}), **common)

    if custom_field.field_type == CustomField.FIELD_SELECT:
        choices = [('', '---------')] + custom_field.get_choices()
        return forms.ChoiceField(choices=choices, initial=initial, widget=forms.Select(attrs={'class': 'form-select'}), **common)

    return forms.CharField(initial=initial, max_length=1000, widget=forms.TextInput(attrs={'class': 'form-control'}), **common)


def to_json_value(value):
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class CustomFieldsFormMixin:
    """
    Adds the tenant's custom fields (named cf_<key>) to a ModelForm.

    Subclasses set custom_field_object_type and call add_custom_fields()
    from __init__; views call save_custom_fields(obj) after saving.
    """

    custom_field_object_type = None

    def add_custom_fields(self, tenant):
        self.tenant = tenant
        self.custom_fields = list(get_fields(tenant, self.custom_field_object_type)) if tenant else []

        stored = {}
        if tenant and self.instance.pk:
            stored = get_values(tenant, self.custom_field_object_type, self.instance.pk)

        for custom_field in self.custom_fields:
            self.fields[self.custom_field_name(custom_field)] = build_form_field(
                custom_field, initial=stored.get(custom_field.pk),
            )

    @staticmethod
    def custom_field_name(custom_field):
        return f'cf_{custom_field.key}'

    def custom_field_bound_fields(self):
        """Bound fields of the custom fields, for rendering a separate section."""
        return [self[self.custom_field_name(custom_field)] for custom_field in self.custom_fields]

    def custom_field_values(self):
        """{field_id: json value} from cleaned_data."""
        return {
            custom_field.pk: to_json_value(self.cleaned_data.get(self.custom_field_name(custom_field)))
            for custom_field in self.custom_fields
        }

    def save_custom_fields(self, obj):
        if not self.custom_fields:
            return 0
        return save_custom_field_values(self.tenant, self.custom_field_object_type, obj.pk, self.custom_field_values())


class CustomFieldForm(forms.Form):
    """Settings form for defining a field. Options: one 'value|label' per line."""

    object_type = forms.ChoiceField(choices=OBJECT_TYPE_CHOICES, widget=forms.Select(attrs={'class': 'form-select'}))
    key = forms.CharField(max_length=100, validators=[key_validator], widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'lead_source'}))
    label = forms.CharField(max_length=200, widget=forms.TextInput(attrs={'class': 'form-control'}))
    field_type = forms.ChoiceField(choices=CustomField.FIELD_TYPE_CHOICES, widget=forms.Select(attrs={'class': 'form-select'}))
    required = forms.BooleanField(required=False, widget=forms.CheckboxInput(attrs={'class': 'form-check-input'}))
    options = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'placeholder': 'web|Website\nreferral|Referral'}),
        help_text='Select fields only: one option per line, as value|label',
    )

    def clean_options(self):
        raw = self.cleaned_data.get('options') or ''
        options = []
        for line in raw.splitlines():
            line = line.strip()
            if not line:
                continue
            value, _, label = line.partition('|')
            value = value.strip()
            options.append({'value': value, 'label': label.strip() or value})
        return options

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('field_type') == CustomField.FIELD_SELECT and not cleaned_data.get('options'):
            raise ValidationError({'options': 'Select fields need at least one option'})
        return cleaned_data
