from django.core.validators import RegexValidator
from django.db import models


OBJECT_TYPE_CONTACT = 'contact'
OBJECT_TYPE_COMPANY = 'company'
OBJECT_TYPE_DEAL = 'deal'

OBJECT_TYPE_CHOICES = [
    (OBJECT_TYPE_CONTACT, 'Contact'),
    (OBJECT_TYPE_COMPANY, 'Company'),
    (OBJECT_TYPE_DEAL, 'Deal'),
]

key_validator = RegexValidator(
    regex=r'^[a-z_]+$',
    message='Use lowercase letters and underscores only',
)


class CustomField(models.Model):

    FIELD_TEXT = 'text'
    FIELD_NUMBER = 'number'
    FIELD_DATE = 'date'
    FIELD_SELECT = 'select'

    FIELD_TYPE_CHOICES = [
        (FIELD_TEXT, 'Text'),
        (FIELD_NUMBER, 'Number'),
        (FIELD_DATE, 'Date'),
        (FIELD_SELECT, 'Select'),
    ]

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='custom_fields')
    object_type = models.CharField(max_length=10, choices=OBJECT_TYPE_CHOICES)
    key = models.CharField(max_length=100, validators=[key_validator], help_text='Machine name, e.g. lead_source')
    label = models.CharField(max_length=200)
    field_type = models.CharField(max_length=10, choices=FIELD_TYPE_CHOICES, default=FIELD_TEXT)
    required = models.BooleanField(default=False)
    options = models.JSONField(blank=True, null=True, help_text='Select options: [{"value": ..., "label": ...}]')
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Custom Field'
        verbose_name_plural = 'Custom Fields'
        ordering = ['object_type', 'position', 'id']
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'object_type', 'key'], name='unique_custom_field_key'),
        ]

    def __str__(self):
        return f"{self.label} ({self.get_object_type_display()})"

    def get_choices(self):
        return [(option['value'], option['label']) for option in (self.options or [])]

    def to_json(self):
        return {
            'id': self.pk,
            'objectType': self.object_type,
            'key': self.key,
            'label': self.label,
            'fieldType': self.field_type,
            'required': self.required,
            'options': self.options,
            'position': self.position,
        }


class CustomFieldValue(models.Model):

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='custom_field_values')
    object_type = models.CharField(max_length=10, choices=OBJECT_TYPE_CHOICES)
    object_id = models.PositiveBigIntegerField()
    field = models.ForeignKey(CustomField, on_delete=models.CASCADE, related_name='values')
    value = models.JSONField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Custom Field Value'
        verbose_name_plural = 'Custom Field Values'
        constraints = [
            models.UniqueConstraint(
                fields=['tenant', 'object_type', 'object_id', 'field'],
                name='unique_custom_field_value',
            ),
        ]
        indexes = [
            models.Index(fields=['tenant', 'object_type', 'object_id'], name='cfvalue_object_idx'),
        ]

    def __str__(self):
        return f"{self.field.key}={self.value}"
