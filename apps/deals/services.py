"""
Deal creation and listing helpers.

Stage changes never happen here: every move goes through
apps.automations.engine.move_deal_to_stage so automations run.
"""

import logging

from django.db.models import Q

from apps.automations.engine import InvalidStageTransition
from apps.pipeline.models import Pipeline
from .models import Deal

logger = logging.getLogger(__name__)


class DealError(Exception):
    pass


def create_deal(tenant, owner, title, value_cents=0, stage=None, contact=None, company=None):
    """
    Create a deal in the tenant's pipeline.

    Args:
        stage: defaults to the first stage of the pipeline

    Raises:
        DealError: the tenant has no pipeline (or it has no stages)
        InvalidStageTransition: stage belongs to another pipeline
    """
    pipeline = Pipeline.objects.for_tenant(tenant)
    if pipeline is None:
        raise DealError('No pipeline found')

    if stage is None:
        stage = pipeline.get_stages().first()
        if stage is None:
            raise DealError('No pipeline found')
    elif stage.pipeline_id != pipeline.pk:
        raise InvalidStageTransition('Stage does not belong to this pipeline')

    deal = Deal.objects.create(
        tenant=tenant,
        pipeline=pipeline,
        stage=stage,
        owner=owner,
        title=title,
        value_cents=value_cents,
        contact=contact,
        company=company,
    )
    logger.info(f"Deal {deal.pk} created in stage {stage.pk}")
    return deal


def filter_deals(deals, search='', stage=None):
    """Search by title, contact name or company name; optional stage filter."""
    if search:
        deals = deals.filter(
            Q(title__icontains=search) |
            Q(contact__first_name__icontains=search) |
            Q(contact__last_name__icontains=search) |
            Q(company__name__icontains=search)
        )
    if stage is not None:
        deals = deals.filter(stage=stage)
    return deals


def build_board(pipeline, deals):
    """
    Kanban columns in stage order.

    Returns:
        list[dict]: {'stage', 'deals', 'count', 'total_cents'} per stage
    """
    columns = []
    for stage in pipeline.get_stages():
        stage_deals = [deal for deal in deals if deal.stage_id == stage.pk]
        columns.append({
            'stage': stage,
            'deals': stage_deals,
            'count': len(stage_deals),
            'total_cents': sum(deal.value_cents for deal in stage_deals),
        })
    return columns
