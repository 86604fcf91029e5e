import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def deliver_stage_automations(deal_id, stage_id, previous_stage_id=None):
    """
    Run a stage's automations for a deal in the worker.

    Queued by move_deal_to_stage() after the transition commits when
    PIPELINE_AUTOMATIONS_ASYNC is on.
    """
    from apps.deals.models import Deal
    from apps.pipeline.models import Stage
    from .engine import run_stage_automations

    try:
        deal = Deal.objects.select_related('contact', 'company', 'owner', 'stage').get(pk=deal_id)
        stage = Stage.objects.get(pk=stage_id)
    except (Deal.DoesNotExist, Stage.DoesNotExist):
        logger.warning(f"Deal {deal_id} or stage {stage_id} no longer exists; automations dropped")
        return 'missing'

    previous_stage = Stage.objects.filter(pk=previous_stage_id).first() if previous_stage_id else None
    deliveries = run_stage_automations(deal, stage, previous_stage)

    return f'{len(deliveries)} automation(s) processed for deal {deal_id}.'


@shared_task
def deliver_task_automation(activity_id):
    """Send a completed task's template in the worker."""
    from apps.activities.models import Activity
    from .engine import run_task_automation

    task = Activity.objects.select_related('template', 'contact', 'deal').filter(pk=activity_id).first()
    if task is None:
        return 'missing'

    delivery = run_task_automation(task)
    return delivery.status if delivery else 'no template'
