from django.core.exceptions import ValidationError
from django.db import models


class AutomationTemplate(models.Model):
    """
    Reusable follow-up email with {placeholders}.

    Attached to pipeline stages (StageAutomation) or to tasks; rendered and
    sent by apps.automations.engine.
    """

    SEND_TO_CONTACT = 'contact'
    SEND_TO_CUSTOM = 'custom'

    SEND_TO_CHOICES = [
        (SEND_TO_CONTACT, 'Contact'),
        (SEND_TO_CUSTOM, 'Custom email'),
    ]

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='automation_templates')
    name = models.CharField(max_length=200)
    message_template = models.TextField(help_text='Message body; supports {contact_name}, {deal_title}, ...')
    send_to = models.CharField(max_length=10, choices=SEND_TO_CHOICES, default=SEND_TO_CONTACT)
    custom_email = models.EmailField(blank=True, null=True, help_text='Recipient when sending to a custom email')
    enabled = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Automation Template'
        verbose_name_plural = 'Automation Templates'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tenant', 'enabled'], name='template_tenant_enabled_idx'),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.send_to == self.SEND_TO_CUSTOM and not self.custom_email:
            raise ValidationError({'custom_email': 'Custom email is required when send to is set to custom'})

    def resolve_recipient(self, contact=None):
        """Email address to send to, or None when there is nobody to send to."""
        if self.send_to == self.SEND_TO_CUSTOM:
            return self.custom_email or None
        if contact is not None:
            return contact.email or None
        return None


class AutomationDelivery(models.Model):
    """One attempted automation message, whatever its outcome."""

    TRIGGER_STAGE_CHANGE = 'stage_change'
    TRIGGER_TASK_COMPLETED = 'task_completed'

    TRIGGER_CHOICES = [
        (TRIGGER_STAGE_CHANGE, 'Stage change'),
        (TRIGGER_TASK_COMPLETED, 'Task completed'),
    ]

    STATUS_SENT = 'sent'
    STATUS_FAILED = 'failed'
    STATUS_SKIPPED = 'skipped'

    STATUS_CHOICES = [
        (STATUS_SENT, 'Sent'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_SKIPPED, 'Skipped'),
    ]

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='automation_deliveries')
    template = models.ForeignKey(AutomationTemplate, on_delete=models.SET_NULL, null=True, blank=True, related_name='deliveries')
    deal = models.ForeignKey('deals.Deal', on_delete=models.SET_NULL, null=True, blank=True, related_name='automation_deliveries')
    activity = models.ForeignKey('activities.Activity', on_delete=models.SET_NULL, null=True, blank=True, related_name='automation_deliveries')
    trigger = models.CharField(max_length=20, choices=TRIGGER_CHOICES)
    recipient = models.EmailField(blank=True)
    subject = models.CharField(max_length=255)
    body = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, db_index=True)
    error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = 'Automation Delivery'
        verbose_name_plural = 'Automation Deliveries'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['tenant', '-created_at'], name='delivery_tenant_created_idx'),
        ]

    def __str__(self):
        return f"{self.subject} → {self.recipient or '-'} ({self.status})"
