import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max

from .models import CustomField, CustomFieldValue

logger = logging.getLogger(__name__)


def get_fields(tenant, object_type):
    return CustomField.objects.filter(tenant=tenant, object_type=object_type).order_by('position', 'id')


def create_custom_field(tenant, object_type, key, label, field_type, required=False, options=None):
    """
    Add a field at the end of the object type's list.

    Raises:
        ValidationError: duplicate key, or a select field without options
    """
    if field_type == CustomField.FIELD_SELECT and not options:
        raise ValidationError({'options': 'Select fields need at least one option'})

    if CustomField.objects.filter(tenant=tenant, object_type=object_type, key=key).exists():
        raise ValidationError({'key': 'A field with this key already exists'})

    max_position = CustomField.objects.filter(
        tenant=tenant, object_type=object_type,
    ).aggregate(max_position=Max('position'))['max_position']

    return CustomField.objects.create(
        tenant=tenant,
        object_type=object_type,
        key=key,
        label=label,
        field_type=field_type,
        required=required,
        options=options if field_type == CustomField.FIELD_SELECT else None,
        position=0 if max_position is None else max_position + 1,
    )


def get_values(tenant, object_type, object_id):
    """{field_id: value} for one object."""
    return dict(
        CustomFieldValue.objects.filter(
            tenant=tenant, object_type=object_type, object_id=object_id,
        ).values_list('field_id', 'value')
    )


@transaction.atomic
def save_custom_field_values(tenant, object_type, object_id, values):
    """
    Upsert {field_id: value} for one object.

    Empty and None values are skipped, leaving any stored value unchanged.
    Field ids that are not the tenant's fields for object_type are ignored.
    """
    field_ids = set(get_fields(tenant, object_type).values_list('pk', flat=True))

    saved = 0
    for field_id, value in values.items():
        if value is None or value == '':
            continue
        if int(field_id) not in field_ids:
            logger.warning(f"Ignoring custom field {field_id} for {object_type} of tenant {tenant.pk}")
            continue

        CustomFieldValue.objects.update_or_create(
            tenant=tenant,
            object_type=object_type,
            object_id=object_id,
            field_id=int(field_id),
            defaults={'value': value},
        )
        saved += 1
    return saved


def delete_values_for(tenant, object_type, object_id):
    CustomFieldValue.objects.filter(tenant=tenant, object_type=object_type, object_id=object_id).delete()


def get_display_values(tenant, object_type, object_id):
    """[(label, value)] of the stored values, in field order."""
    values = get_values(tenant, object_type, object_id)
    return [
        (field.label, values[field.pk])
        for field in get_fields(tenant, object_type)
        if field.pk in values
    ]
