from django import forms
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Fieldset, Submit, Div, Field, HTML
from crispy_forms.bootstrap import FormActions

from apps.core.models import Tenant
from .models import ROLE_CHOICES, ROLE_MEMBER
from .services import tenant_slug

User = get_user_model()


# LOGIN FORM
class LoginForm(forms.Form):
    email = forms.EmailField(
        label=_('Email Address'),
        max_length=255,
        required=True,
        widget=forms.EmailInput(attrs={
            'class': 'form-control',
            'placeholder': _('you@company.com'),
            'autofocus': True,
        })
    )

    password = forms.CharField(
        label=_('Password'),
        required=True,
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('Enter your password'),
        })
    )

    remember = forms.BooleanField(
        label=_('Remember me'),
        required=False,
        initial=False,
        widget=forms.CheckboxInput(attrs={
            'class': 'form-check-input',
        })
    )

    def __init__(self, *args, **kwargs):

        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = 'post'

        self.helper.layout = Layout(
            Field('email', css_class='mb-3'),
            Field('password', css_class='mb-3'),
            Field('remember', css_class='mb-3'),
            FormActions(
                Submit('submit', _('Login'), css_class='btn btn-primary w-100')
            )
        )

    def clean_email(self):

        email = self.cleaned_data.get('email', '')
        return email.lower().strip()


# SIGNUP FORM
class SignupForm(forms.Form):
    """New organisation + its first admin."""

    tenant_name = forms.CharField(
        label=_('Company Name'),
        max_length=200,
        widget=forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
    )
    name = forms.CharField(
        label=_('Your Name'),
        max_length=101,
        widget=forms.TextInput(attrs={'class': 'form-control'}),
    )
    email = forms.EmailField(
        label=_('Email Address'),
        max_length=255,
        widget=forms.EmailInput(attrs={'class': 'form-control'}),
    )
    password = forms.CharField(
        label=_('Password'),
        widget=forms.PasswordInput(attrs={'class': 'form-control'}),
        help_text=_('At least 8 characters.'),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            'tenant_name',
            'name',
            'email',
            'password',
            FormActions(
                Submit('submit', _('Create Account'), css_class='btn btn-primary w-100')
            )
        )

    def clean_tenant_name(self):
        tenant_name = self.cleaned_data['tenant_name'].strip()
        if len(tenant_name) < 2:
            raise ValidationError(_('Company name must be at least 2 characters'))

        slug = tenant_slug(tenant_name)
        if not slug:
            raise ValidationError(_('Company name must contain letters or numbers'))
        if Tenant.objects.filter(slug=slug).exists():
            raise ValidationError(_('Company name already taken, please choose another'))
        return tenant_name

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if len(name) < 2:
            raise ValidationError(_('Name must be at least 2 characters'))
        return name

    def clean_email(self):
        email = self.cleaned_data['email'].lower().strip()
        if User.objects.filter(email=email).exists():
            raise ValidationError(_('Email already registered'))
        return email

    def clean_password(self):
        password = self.cleaned_data['password']
        if len(password) < 8:
            raise ValidationError(_('Password must be at least 8 characters'))
        return password


# TEAM MEMBER FORMS
class TeamMemberForm(forms.Form):
    """
    Create or update a team member.

    Pass instance=<User> when editing: the password becomes optional and
    the email uniqueness check ignores the edited user.
    """

    name = forms.CharField(
        label=_('Name'),
        max_length=101,
        widget=forms.TextInput(attrs={'class': 'form-control'}),
    )
    email = forms.EmailField(
        label=_('Email Address'),
        max_length=255,
        widget=forms.EmailInput(attrs={'class': 'form-control'}),
    )
    password = forms.CharField(
        label=_('Password'),
        required=False,
        widget=forms.PasswordInput(attrs={'class': 'form-control'}),
        help_text=_('At least 6 characters.'),
    )
    role = forms.ChoiceField(
        label=_('Role'),
        choices=ROLE_CHOICES,
        initial=ROLE_MEMBER,
        widget=forms.Select(attrs={'class': 'form-select'}),
    )

    def __init__(self, *args, **kwargs):
        self.instance = kwargs.pop('instance', None)
        if self.instance is not None and 'initial' not in kwargs:
            kwargs['initial'] = {
                'name': f"{self.instance.first_name} {self.instance.last_name}".strip(),
                'email': self.instance.email,
                'role': self.instance.role,
            }
        super().__init__(*args, **kwargs)

        if self.instance is None:
            self.fields['password'].required = True
        else:
            self.fields['password'].help_text = _('Leave blank to keep the current password.')

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            Fieldset(
                _('Team Member'),
                Div(
                    Div('name', css_class='col-md-6'),
                    Div('email', css_class='col-md-6'),
                    css_class='row'
                ),
                Div(
                    Div('password', css_class='col-md-6'),
                    Div('role', css_class='col-md-6'),
                    css_class='row'
                ),
            ),
            FormActions(
                Submit('submit', _('Save'), css_class='btn btn-primary'),
                HTML('<a href="{% url \'accounts:team\' %}" class="btn btn-secondary">Cancel</a>'),
            )
        )

    def clean_name(self):
        name = self.cleaned_data['name'].strip()
        if not name:
            raise ValidationError(_('Name is required'))
        return name

    def clean_email(self):
        email = self.cleaned_data['email'].lower().strip()

        existing = User.objects.filter(email=email)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise ValidationError(_('A user with this email already exists'))

        return email

    def clean_password(self):
        password = self.cleaned_data.get('password') or ''
        if password and len(password) < 6:
            raise ValidationError(_('Password must be at least 6 characters'))
        return password


# PROFILE FORM
class ProfileForm(forms.ModelForm):

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'avatar']
        widgets = {
            'first_name': forms.TextInput(attrs={'class': 'form-control'}),
            'last_name': forms.TextInput(attrs={'class': 'form-control'}),
            'avatar': forms.FileInput(attrs={'class': 'form-control', 'accept': 'image/*'}),
        }
        help_texts = {
            'avatar': _('Recommended: 300x300px, max 2MB (JPG, PNG)'),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.form_enctype = 'multipart/form-data'
        self.helper.layout = Layout(
            Div(
                Div('first_name', css_class='col-md-6'),
                Div('last_name', css_class='col-md-6'),
                css_class='row'
            ),
            'avatar',
            FormActions(
                Submit('submit', _('Update'), css_class='btn btn-primary'),
            )
        )

    def clean_avatar(self):

        avatar = self.cleaned_data.get('avatar')

        # Only freshly uploaded files carry a content type
        if avatar and hasattr(avatar, 'content_type'):
            if avatar.size > 2 * 1024 * 1024:
                raise ValidationError(_('Avatar file size must be less than 2MB.'))

            if not avatar.content_type.startswith('image/'):
                raise ValidationError(_('Avatar must be an image file (JPG, PNG, GIF).'))

        return avatar
