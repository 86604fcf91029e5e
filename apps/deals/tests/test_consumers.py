"""
Live Board Broadcast Tests
==========================

Test Coverage:
1. deal.moved events reach the tenant's board group
2. A failing channel layer never aborts a stage change
"""

from unittest import mock

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.test import TestCase

from apps.accounts.services import register_tenant
from apps.automations.engine import move_deal_to_stage
from apps.deals.consumers import board_group_name
from apps.deals.models import Deal
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline


class BoardBroadcastTest(TestCase):

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.stages = list(Pipeline.objects.for_tenant(self.tenant).get_stages())
        self.deal = create_deal(self.tenant, self.admin, 'Big Deal', value_cents=500000)

    def test_move_is_broadcast_to_tenant_group(self):
        channel_layer = get_channel_layer()
        channel_name = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.group_add)(board_group_name(self.tenant.pk), channel_name)

        move_deal_to_stage(self.deal, self.stages[1], user=self.admin)

        message = async_to_sync(channel_layer.receive)(channel_name)
        self.assertEqual(message['type'], 'deal.moved')
        self.assertEqual(message['deal']['id'], self.deal.pk)
        self.assertEqual(message['deal']['stage_id'], self.stages[1].pk)
        self.assertEqual(message['deal']['previous_stage_id'], self.stages[0].pk)

    def test_broadcast_failure_keeps_the_move(self):
        with mock.patch('apps.deals.consumers.get_channel_layer', side_effect=Exception('redis down')):
            with self.assertLogs('apps.deals.consumers', level='ERROR'):
                move_deal_to_stage(self.deal, self.stages[1], user=self.admin)

        self.assertEqual(Deal.objects.get(pk=self.deal.pk).stage, self.stages[1])
