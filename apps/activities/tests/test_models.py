"""
Task Status Tests
=================

Test Coverage:
1. update_status - completed_at bookkeeping
2. Completing a task sends its automation template once
3. Async mode queues the delivery after commit
"""

from datetime import timedelta
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone

from apps.accounts.services import register_tenant
from apps.activities.models import Activity
from apps.automations.models import AutomationDelivery, AutomationTemplate
from apps.contacts.models import Contact
from apps.deals.services import create_deal


class TaskStatusTest(TestCase):

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.contact = Contact.objects.create(
            tenant=self.tenant, owner=self.admin,
            first_name='Ann', last_name='Lee', email='ann@client.com',
        )
        self.deal = create_deal(self.tenant, self.admin, 'Big Deal', value_cents=50000, contact=self.contact)
        self.template = AutomationTemplate.objects.create(
            tenant=self.tenant,
            name='Thanks',
            message_template='Hi {contact_first_name}, we finished "{task_title}" for {deal_title}.',
        )
        self.task = Activity.objects.create(
            tenant=self.tenant,
            type=Activity.TYPE_TASK,
            body='Send proposal',
            status=Activity.STATUS_TODO,
            deal=self.deal,
            assigned_user=self.admin,
            template=self.template,
        )

    def test_done_stamps_completed_at(self):
        self.task.update_status(Activity.STATUS_DONE)

        self.task.refresh_from_db()
        self.assertEqual(self.task.status, Activity.STATUS_DONE)
        self.assertIsNotNone(self.task.completed_at)

    def test_reopening_clears_completed_at(self):
        self.task.update_status(Activity.STATUS_DONE)
        self.task.update_status(Activity.STATUS_IN_PROGRESS)

        self.task.refresh_from_db()
        self.assertIsNone(self.task.completed_at)

    def test_completion_sends_template(self):
        delivery = self.task.update_status(Activity.STATUS_DONE)

        self.assertEqual(delivery.status, AutomationDelivery.STATUS_SENT)
        self.assertEqual(delivery.trigger, AutomationDelivery.TRIGGER_TASK_COMPLETED)
        self.assertEqual(delivery.activity, self.task)

        message = mail.outbox[0]
        self.assertEqual(message.to, ['ann@client.com'])
        self.assertEqual(message.subject, 'Task Completed: Thanks')
        self.assertEqual(message.body, 'Hi Ann, we finished "Send proposal" for Big Deal.')

    def test_marking_done_twice_sends_once(self):
        self.task.update_status(Activity.STATUS_DONE)
        second = self.task.update_status(Activity.STATUS_DONE)

        self.assertIsNone(second)
        self.assertEqual(len(mail.outbox), 1)

    def test_disabled_template_not_sent(self):
        self.template.enabled = False
        self.template.save()

        self.assertIsNone(self.task.update_status(Activity.STATUS_DONE))
        self.assertEqual(len(mail.outbox), 0)

    def test_task_without_template(self):
        self.task.template = None
        self.task.save()

        self.assertIsNone(self.task.update_status(Activity.STATUS_DONE))

    @override_settings(PIPELINE_AUTOMATIONS_ASYNC=True)
    def test_async_completion_queued(self):
        with mock.patch('apps.automations.tasks.deliver_task_automation.delay') as delay:
            with self.captureOnCommitCallbacks(execute=True):
                result = self.task.update_status(Activity.STATUS_DONE)

        self.assertIsNone(result)
        delay.assert_called_once_with(self.task.pk)

    def test_is_overdue(self):
        self.task.due_at = timezone.now() - timedelta(hours=1)
        self.assertTrue(self.task.is_overdue)

        self.task.status = Activity.STATUS_DONE
        self.assertFalse(self.task.is_overdue)
