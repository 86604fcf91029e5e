"""
Stage-automation engine.

Moving a deal to another stage goes through move_deal_to_stage():

1. validate_transition() checks the target stage belongs to the deal's
   pipeline; moving to the current stage is a no-op.
2. The stage is saved and an activity note recorded in one transaction.
3. The enabled templates attached to the new stage are rendered and sent
   in StageAutomation.position order.
4. Each send is isolated: a backend error is logged and stored as a
   failed AutomationDelivery; the transition is never rolled back.

Completing a task runs its template through the same delivery path
(see run_task_automation).
"""

import logging
import re

from django.conf import settings
from django.db import transaction

from apps.activities.models import Activity
from .email import deal_subject, send_automation_email, task_subject
from .models import AutomationDelivery

logger = logging.getLogger(__name__)


class InvalidStageTransition(Exception):
    """The target stage is not part of the deal's pipeline."""
    pass


# Placeholders a template may use; anything else in braces is left as typed
TEMPLATE_VARIABLES = (
    'contact_name',
    'contact_first_name',
    'contact_email',
    'deal_title',
    'deal_value',
    'stage_name',
    'previous_stage_name',
    'company_name',
    'owner_name',
    'task_title',
    'task_body',
)

PLACEHOLDER_PATTERN = re.compile(r'\{([a-z_]+)\}')


def render_template(text, context):
    """
    Replace every {placeholder} from TEMPLATE_VARIABLES with its context value.

    Unknown placeholders stay untouched; missing or None values render as ''.

    >>> render_template('Hi {contact_name}, {unknown}', {'contact_name': 'Ann'})
    'Hi Ann, {unknown}'
    """
    def replace(match):
        name = match.group(1)
        if name not in TEMPLATE_VARIABLES:
            return match.group(0)
        value = context.get(name)
        return '' if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(replace, text or '')


def _contact_values(contact):
    if contact is None:
        return {}
    return {
        'contact_name': contact.get_full_name(),
        'contact_first_name': contact.first_name,
        'contact_email': contact.email,
    }


def build_deal_context(deal, previous_stage=None):
    context = {
        'deal_title': deal.title,
        'deal_value': deal.value_display,
        'stage_name': deal.stage.name if deal.stage_id else None,
        'previous_stage_name': previous_stage.name if previous_stage else None,
        'company_name': deal.company.name if deal.company_id else None,
        'owner_name': deal.owner.get_full_name() if deal.owner_id else None,
    }
    context.update(_contact_values(deal.contact))
    return context


def build_task_context(task):
    context = {}
    if task.deal_id:
        context.update(build_deal_context(task.deal))
    context.update(_contact_values(task.contact or (task.deal.contact if task.deal_id else None)))
    context['task_title'] = task.body
    context['task_body'] = task.body
    return context


# TRANSITIONS
def validate_transition(deal, stage):
    """
    Returns:
        bool: False when the deal already sits in `stage` (nothing to do)

    Raises:
        InvalidStageTransition: stage belongs to another pipeline or tenant
    """
    if stage is None or stage.pipeline_id != deal.pipeline_id:
        raise InvalidStageTransition('Stage does not belong to this pipeline')

    return stage.pk != deal.stage_id


def move_deal_to_stage(deal, stage, user=None):
    """
    Move a deal to `stage` and run the stage's automations.

    Returns:
        list[AutomationDelivery]: deliveries made synchronously (empty for a
        no-op move or when automations run in Celery)

    Raises:
        InvalidStageTransition
    """
    if not validate_transition(deal, stage):
        return []

    previous_stage = deal.stage

    with transaction.atomic():
        deal.stage = stage
        deal.save(update_fields=['stage', 'updated_at'])

        Activity.objects.create(
            tenant_id=deal.tenant_id,
            type=Activity.TYPE_NOTE,
            body=f'Stage changed from "{previous_stage.name}" to "{stage.name}"',
            deal=deal,
            contact=deal.contact,
            created_by=user,
        )

    logger.info(f"Deal {deal.pk} moved from {previous_stage.pk} to {stage.pk}")

    if settings.PIPELINE_AUTOMATIONS_ASYNC:
        from .tasks import deliver_stage_automations

        transaction.on_commit(
            lambda: deliver_stage_automations.delay(deal.pk, stage.pk, previous_stage.pk)
        )
        deliveries = []
    else:
        deliveries = run_stage_automations(deal, stage, previous_stage)

    from apps.deals.consumers import broadcast_deal_moved
    broadcast_deal_moved(deal, previous_stage)

    return deliveries


# AUTOMATION LOOKUP
def get_stage_automations(stage, tenant_id):
    """Enabled automations of the tenant attached to `stage`, in position order."""
    return stage.automations.filter(
        template__enabled=True,
        template__tenant_id=tenant_id,
    ).select_related('template').order_by('position', 'id')


def run_stage_automations(deal, stage, previous_stage=None):
    context = build_deal_context(deal, previous_stage)
    subject = deal_subject(deal.title)

    deliveries = []
    for automation in get_stage_automations(stage, deal.tenant_id):
        template = automation.template
        deliveries.append(deliver(
            template=template,
            recipient=template.resolve_recipient(deal.contact),
            subject=subject,
            body=render_template(template.message_template, context),
            trigger=AutomationDelivery.TRIGGER_STAGE_CHANGE,
            deal=deal,
        ))
    return deliveries


def run_task_automation(task):
    """
    Send the task's template after completion.

    Returns:
        AutomationDelivery or None when the task has no enabled template
    """
    template = task.template
    if template is None or not template.enabled or template.tenant_id != task.tenant_id:
        return None

    contact = task.contact or (task.deal.contact if task.deal_id else None)
    return deliver(
        template=template,
        recipient=template.resolve_recipient(contact),
        subject=task_subject(template.name),
        body=render_template(template.message_template, build_task_context(task)),
        trigger=AutomationDelivery.TRIGGER_TASK_COMPLETED,
        deal=task.deal,
        activity=task,
    )


# DELIVERY
def deliver(template, recipient, subject, body, trigger, deal=None, activity=None):
    """
    Send one message and record the outcome. Never raises for send errors.
    """
    delivery = AutomationDelivery(
        tenant_id=template.tenant_id,
        template=template,
        deal=deal,
        activity=activity,
        trigger=trigger,
        recipient=recipient or '',
        subject=subject,
        body=body,
    )

    if not recipient:
        logger.warning(f"No recipient for automation template {template.pk}; skipped")
        delivery.status = AutomationDelivery.STATUS_SKIPPED
        delivery.error = 'No recipient email'
        delivery.save()
        return delivery

    try:
        sent = send_automation_email(recipient, subject, body)
    except Exception as e:
        logger.exception(f"Automation template {template.pk} failed for {recipient}")
        delivery.status = AutomationDelivery.STATUS_FAILED
        delivery.error = str(e) or e.__class__.__name__
    else:
        if sent:
            logger.info(f"Automation template {template.pk} sent to {recipient}")
            delivery.status = AutomationDelivery.STATUS_SENT
        else:
            logger.warning(f"Automation template {template.pk} not accepted by mail backend")
            delivery.status = AutomationDelivery.STATUS_FAILED
            delivery.error = 'Mail backend did not accept the message'

    delivery.save()
    return delivery
