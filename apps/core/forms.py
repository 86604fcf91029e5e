from django import forms

from .branding import COLOR_PRESETS
from .models import DEFAULT_ENTITY_LABELS, ENTITY_LABEL_MAX_LENGTH


class BrandingForm(forms.Form):

    logo_url = forms.URLField(
        label='Logo URL',
        max_length=500,
        required=False,
        widget=forms.URLInput(attrs={'class': 'form-control', 'placeholder': 'https://example.com/logo.png'}),
        help_text='Leave empty to remove the logo',
    )
    color_scheme = forms.ChoiceField(
        label='Color scheme',
        choices=[(preset['id'], preset['name']) for preset in COLOR_PRESETS],
        widget=forms.RadioSelect,
    )


class EntityLabelsForm(forms.Form):
    """The six display names; every field is required."""

    deals_label = forms.CharField(label='Deals (plural)', max_length=ENTITY_LABEL_MAX_LENGTH)
    deals_singular_label = forms.CharField(label='Deal (singular)', max_length=ENTITY_LABEL_MAX_LENGTH)
    contacts_label = forms.CharField(label='Contacts (plural)', max_length=ENTITY_LABEL_MAX_LENGTH)
    contacts_singular_label = forms.CharField(label='Contact (singular)', max_length=ENTITY_LABEL_MAX_LENGTH)
    companies_label = forms.CharField(label='Companies (plural)', max_length=ENTITY_LABEL_MAX_LENGTH)
    companies_singular_label = forms.CharField(label='Company (singular)', max_length=ENTITY_LABEL_MAX_LENGTH)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name, field in self.fields.items():
            field.widget.attrs.update({
                'class': 'form-control',
                'placeholder': DEFAULT_ENTITY_LABELS[name],
            })
