"""
Stage administration.

All functions expect the caller to have checked admin access; tenant
ownership of the stage and templates is checked here.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.automations.models import AutomationTemplate
from .models import Stage, StageAutomation

logger = logging.getLogger(__name__)


class StageDeletionError(Exception):
    pass


class StageAutomationError(Exception):
    pass


def _validate_flags(is_won, is_lost):
    if is_won and is_lost:
        raise ValidationError('A stage cannot be both won and lost')


def create_stage(pipeline, name, position, is_won=False, is_lost=False, probability_percent=0, color=None):
    _validate_flags(is_won, is_lost)
    return Stage.objects.create(
        pipeline=pipeline,
        name=name,
        position=position,
        is_won=is_won,
        is_lost=is_lost,
        probability_percent=probability_percent,
        color=color or Stage.default_color(is_won, is_lost),
    )


def update_stage(stage, **fields):
    for field, value in fields.items():
        setattr(stage, field, value)
    _validate_flags(stage.is_won, stage.is_lost)
    stage.save()
    return stage


def delete_stage(stage):
    """
    Raises:
        StageDeletionError: deals still sit in the stage
    """
    deal_count = stage.deals.count()
    if deal_count > 0:
        raise StageDeletionError(
            f'Cannot delete stage with {deal_count} deals. Move deals to another stage first.'
        )
    stage.delete()


def get_tenant_stage(tenant, stage_id):
    try:
        return Stage.objects.select_related('pipeline').get(pk=stage_id, pipeline__tenant=tenant)
    except (Stage.DoesNotExist, ValueError, TypeError):
        return None


@transaction.atomic
def update_stage_automations(tenant, stage_id, template_ids):
    """
    Replace a stage's automations with template_ids, in that order.

    Raises:
        StageAutomationError: unknown stage for this tenant, or any template
        id that is not one of the tenant's templates
    """
    stage = get_tenant_stage(tenant, stage_id)
    if stage is None:
        raise StageAutomationError('Stage not found')

    try:
        template_ids = [int(template_id) for template_id in template_ids]
    except (TypeError, ValueError):
        raise StageAutomationError('Invalid automation template IDs')

    if template_ids:
        found = AutomationTemplate.objects.filter(tenant=tenant, pk__in=template_ids).count()
        if found != len(template_ids):
            raise StageAutomationError('Invalid automation template IDs')

    StageAutomation.objects.filter(stage=stage).delete()
    StageAutomation.objects.bulk_create([
        StageAutomation(stage=stage, template_id=template_id, position=index)
        for index, template_id in enumerate(template_ids)
    ])

    logger.info(f"Stage {stage.pk} automations set to {template_ids}")
    return stage
