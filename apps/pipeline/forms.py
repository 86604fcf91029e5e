from django import forms

from .models import Stage


class StageForm(forms.ModelForm):

    class Meta:
        model = Stage
        fields = ['name', 'position', 'probability_percent', 'is_won', 'is_lost', 'color']

        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'position': forms.NumberInput(attrs={'class': 'form-control', 'min': 0}),
            'probability_percent': forms.NumberInput(attrs={'class': 'form-control', 'min': 0, 'max': 100}),
            'is_won': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'is_lost': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'color': forms.TextInput(attrs={'class': 'form-control form-control-color', 'type': 'color'}),
        }

        labels = {
            'probability_percent': 'Probability (%)',
            'is_won': 'Won stage',
            'is_lost': 'Lost stage',
        }

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise forms.ValidationError('Stage name is required')
        return name

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('is_won') and cleaned_data.get('is_lost'):
            raise forms.ValidationError('A stage cannot be both won and lost')
        return cleaned_data
