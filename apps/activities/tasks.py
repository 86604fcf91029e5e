import logging

from celery import shared_task
from django.db import transaction
from django.utils import timezone

from .models import Activity

logger = logging.getLogger(__name__)


@shared_task
def send_task_due_reminders():
    """
    Log a reminder note for every open task past its due date.

    reminder_sent_at marks the task so each one is reminded at most once.
    Scheduled in config/celery.py
    """
    now = timezone.now()
    tasks = Activity.objects.filter(
        type=Activity.TYPE_TASK,
        due_at__lte=now,
        reminder_sent_at__isnull=True,
    ).exclude(status=Activity.STATUS_DONE).select_related('assigned_user')

    reminders_sent = 0

    for task in tasks:
        assignee = task.assigned_user.get_full_name() if task.assigned_user else 'Unassigned'
        with transaction.atomic():
            Activity.objects.create(
                tenant_id=task.tenant_id,
                type=Activity.TYPE_NOTE,
                body=f'Reminder: task "{task.body[:100]}" assigned to {assignee} is overdue',
                deal_id=task.deal_id,
                contact_id=task.contact_id,
            )
            task.reminder_sent_at = now
            task.save(update_fields=['reminder_sent_at'])
        reminders_sent += 1

    logger.info(f"{reminders_sent} task reminder(s) logged")
    return f'{reminders_sent} task reminders sent.'
