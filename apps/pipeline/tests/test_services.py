"""
Pipeline Services Tests
=======================

Test Coverage:
1. Default pipeline created at signup
2. Stage create / update - won and lost are exclusive
3. Stage delete guard
4. update_stage_automations - order, replacement, tenant checks
"""

from django.core.exceptions import ValidationError
from django.test import TestCase

from apps.accounts.services import register_tenant
from apps.automations.models import AutomationTemplate
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline, Stage, StageAutomation
from apps.pipeline.services import (
    StageAutomationError,
    StageDeletionError,
    create_stage,
    delete_stage,
    update_stage,
    update_stage_automations,
)


class DefaultPipelineTest(TestCase):

    def test_signup_creates_default_stages(self):
        admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')

        pipeline = Pipeline.objects.for_tenant(admin.tenant)
        stages = list(pipeline.get_stages())

        self.assertEqual(pipeline.name, 'Sales Pipeline')
        self.assertEqual(
            [(s.name, s.probability_percent, s.is_won, s.is_lost) for s in stages],
            [
                ('Lead', 10, False, False),
                ('Qualified', 25, False, False),
                ('Proposal', 50, False, False),
                ('Negotiation', 75, False, False),
                ('Closed Won', 100, True, False),
                ('Closed Lost', 0, False, True),
            ],
        )
        self.assertEqual([s.position for s in stages], list(range(6)))
        self.assertEqual(stages[4].color, '#28a745')
        self.assertEqual(stages[5].color, '#dc3545')


class StageServicesTest(TestCase):

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.pipeline = Pipeline.objects.for_tenant(self.tenant)

    def test_create_stage(self):
        stage = create_stage(self.pipeline, 'Demo', 2, probability_percent=40)

        self.assertEqual(stage.color, '#667eea')
        self.assertEqual(stage.probability_percent, 40)

    def test_won_and_lost_rejected(self):
        with self.assertRaises(ValidationError):
            create_stage(self.pipeline, 'Both', 9, is_won=True, is_lost=True)

        stage = self.pipeline.get_stages().get(is_won=True)
        with self.assertRaises(ValidationError):
            update_stage(stage, is_lost=True)

    def test_delete_empty_stage(self):
        stage = create_stage(self.pipeline, 'Demo', 9)

        delete_stage(stage)

        self.assertFalse(Stage.objects.filter(pk=stage.pk).exists())

    def test_delete_stage_with_deals_refused(self):
        stage = self.pipeline.get_stages().first()
        create_deal(self.tenant, self.admin, 'Deal A')
        create_deal(self.tenant, self.admin, 'Deal B')

        with self.assertRaisesMessage(StageDeletionError, 'Cannot delete stage with 2 deals'):
            delete_stage(stage)


class UpdateStageAutomationsTest(TestCase):

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.stage = Pipeline.objects.for_tenant(self.tenant).get_stages()[1]
        self.first = AutomationTemplate.objects.create(tenant=self.tenant, name='First', message_template='1')
        self.second = AutomationTemplate.objects.create(tenant=self.tenant, name='Second', message_template='2')

    def test_order_follows_ids(self):
        update_stage_automations(self.tenant, self.stage.pk, [self.second.pk, str(self.first.pk)])

        self.assertEqual(
            [(a.template, a.position) for a in self.stage.get_automations()],
            [(self.second, 0), (self.first, 1)],
        )

    def test_replaces_existing(self):
        update_stage_automations(self.tenant, self.stage.pk, [self.first.pk, self.second.pk])
        update_stage_automations(self.tenant, self.stage.pk, [self.second.pk])

        self.assertEqual([a.template for a in self.stage.get_automations()], [self.second])

    def test_empty_list_clears(self):
        update_stage_automations(self.tenant, self.stage.pk, [self.first.pk])
        update_stage_automations(self.tenant, self.stage.pk, [])

        self.assertFalse(StageAutomation.objects.filter(stage=self.stage).exists())

    def test_foreign_template_rejected(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        foreign = AutomationTemplate.objects.create(tenant=other.tenant, name='Foreign', message_template='x')
        update_stage_automations(self.tenant, self.stage.pk, [self.first.pk])

        with self.assertRaisesMessage(StageAutomationError, 'Invalid automation template IDs'):
            update_stage_automations(self.tenant, self.stage.pk, [self.second.pk, foreign.pk])

        # Previous automations are kept
        self.assertEqual([a.template for a in self.stage.get_automations()], [self.first])

    def test_non_numeric_id_rejected(self):
        with self.assertRaises(StageAutomationError):
            update_stage_automations(self.tenant, self.stage.pk, ['abc'])

    def test_foreign_stage_not_found(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        foreign_stage = Pipeline.objects.for_tenant(other.tenant).get_stages().first()

        with self.assertRaisesMessage(StageAutomationError, 'Stage not found'):
            update_stage_automations(self.tenant, foreign_stage.pk, [self.first.pk])
