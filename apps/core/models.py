from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify

from .branding import DEFAULT_PRESET_ID, is_valid_preset_id


# Default display names for the three renameable entities
DEFAULT_ENTITY_LABELS = {
    'deals_label': 'Deals',
    'deals_singular_label': 'Deal',
    'contacts_label': 'Contacts',
    'contacts_singular_label': 'Contact',
    'companies_label': 'Companies',
    'companies_singular_label': 'Company',
}

ENTITY_LABEL_MAX_LENGTH = 50


class Tenant(models.Model):

    # Basic Information
    name = models.CharField(max_length=200, help_text="Organisation name")
    slug = models.SlugField(max_length=200, unique=True, help_text="URL-friendly name (derived from the name)")

    # Branding
    logo_url = models.URLField(max_length=500, blank=True, null=True, help_text="Public URL of the tenant logo")
    color_scheme = models.CharField(max_length=50, default=DEFAULT_PRESET_ID, help_text="Colour preset id")

    # Entity labels
    deals_label = models.CharField(max_length=ENTITY_LABEL_MAX_LENGTH, default='Deals')
    deals_singular_label = models.CharField(max_length=ENTITY_LABEL_MAX_LENGTH, default='Deal')
    contacts_label = models.CharField(max_length=ENTITY_LABEL_MAX_LENGTH, default='Contacts')
    contacts_singular_label = models.CharField(max_length=ENTITY_LABEL_MAX_LENGTH, default='Contact')
    companies_label = models.CharField(max_length=ENTITY_LABEL_MAX_LENGTH, default='Companies')
    companies_singular_label = models.CharField(max_length=ENTITY_LABEL_MAX_LENGTH, default='Company')

    # Status
    is_active = models.BooleanField(default=True, help_text="Is tenant active?")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Tenant"
        verbose_name_plural = "Tenants"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_active'], name='tenant_active_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):

        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def get_active_users_count(self):

        return self.users.filter(is_active=True).count()

    def get_entity_labels(self):
        """Labels keyed like DEFAULT_ENTITY_LABELS, blanks replaced by defaults."""
        return {
            field: getattr(self, field) or default
            for field, default in DEFAULT_ENTITY_LABELS.items()
        }

    def update_branding(self, logo_url, color_scheme):
        """
        Change logo and colour preset.

        An empty logo URL clears the logo. Raises ValidationError for an
        unknown preset id.
        """
        if not is_valid_preset_id(color_scheme):
            raise ValidationError({'color_scheme': 'Invalid color scheme'})

        self.logo_url = (logo_url or '').strip() or None
        self.color_scheme = color_scheme
        self.save(update_fields=['logo_url', 'color_scheme', 'updated_at'])

    def update_entity_labels(self, **labels):
        """
        Replace all six entity labels.

        Every label is required and limited to ENTITY_LABEL_MAX_LENGTH chars.
        """
        errors = {}
        cleaned = {}
        for field in DEFAULT_ENTITY_LABELS:
            value = (labels.get(field) or '').strip()
            if not value:
                errors[field] = 'This label is required'
            elif len(value) > ENTITY_LABEL_MAX_LENGTH:
                errors[field] = f'Max {ENTITY_LABEL_MAX_LENGTH} characters'
            cleaned[field] = value

        if errors:
            raise ValidationError(errors)

        for field, value in cleaned.items():
            setattr(self, field, value)
        self.save(update_fields=list(cleaned) + ['updated_at'])

    def backfill_entity_labels(self):
        """Fill empty labels with defaults. Returns True if anything changed."""
        changed = []
        for field, default in DEFAULT_ENTITY_LABELS.items():
            if not getattr(self, field):
                setattr(self, field, default)
                changed.append(field)

        if changed:
            self.save(update_fields=changed + ['updated_at'])
        return bool(changed)
