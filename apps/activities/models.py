from django.conf import settings
from django.db import models, transaction
from django.utils import timezone


class Activity(models.Model):
    """
    A note, call or task.

    Tasks carry a status, an assignee and optionally an automation
    template that is sent when the task is marked done.
    """

    TYPE_NOTE = 'note'
    TYPE_CALL = 'call'
    TYPE_TASK = 'task'

    TYPE_CHOICES = [
        (TYPE_NOTE, 'Note'),
        (TYPE_CALL, 'Call'),
        (TYPE_TASK, 'Task'),
    ]

    STATUS_TODO = 'todo'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_DONE = 'done'

    STATUS_CHOICES = [
        (STATUS_TODO, 'To do'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_DONE, 'Done'),
    ]

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='activities')
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    body = models.TextField()

    due_at = models.DateTimeField(null=True, blank=True, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, null=True, blank=True, help_text='Tasks only')
    completed_at = models.DateTimeField(null=True, blank=True)
    reminder_sent_at = models.DateTimeField(null=True, blank=True, help_text='When the overdue reminder was logged')

    assigned_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_activities')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_activities')
    deal = models.ForeignKey('deals.Deal', on_delete=models.CASCADE, null=True, blank=True, related_name='activities')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.CASCADE, null=True, blank=True, related_name='activities')
    template = models.ForeignKey('automations.AutomationTemplate', on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks', help_text='Sent when the task is completed')

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Activity'
        verbose_name_plural = 'Activities'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['tenant', 'type', '-created_at'], name='activity_tenant_type_idx'),
            models.Index(fields=['tenant', 'status'], name='activity_tenant_status_idx'),
            models.Index(fields=['assigned_user', 'status'], name='activity_assignee_status_idx'),
        ]

    def __str__(self):
        preview = self.body[:50] + '...' if len(self.body) > 50 else self.body
        return f"{self.get_type_display()}: {preview}"

    @property
    def is_task(self):
        return self.type == self.TYPE_TASK

    @property
    def is_overdue(self):
        return (
            self.is_task
            and self.status != self.STATUS_DONE
            and self.due_at is not None
            and self.due_at < timezone.now()
        )

    def update_status(self, status):
        """
        Change a task's status.

        'done' stamps completed_at and sends the task's automation template;
        any other status clears completed_at.

        Returns:
            AutomationDelivery or None
        """
        was_done = self.status == self.STATUS_DONE
        self.status = status
        if status != self.STATUS_DONE:
            self.completed_at = None
        elif not was_done or self.completed_at is None:
            self.completed_at = timezone.now()
        self.save(update_fields=['status', 'completed_at', 'updated_at'])

        if status != self.STATUS_DONE or was_done or self.template_id is None:
            return None

        if settings.PIPELINE_AUTOMATIONS_ASYNC:
            from apps.automations.tasks import deliver_task_automation

            transaction.on_commit(lambda: deliver_task_automation.delay(self.pk))
            return None

        from apps.automations.engine import run_task_automation
        return run_task_automation(self)
