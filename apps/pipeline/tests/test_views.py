"""
Pipeline Settings Views Tests
=============================

Test Coverage:
1. Admin-only access
2. Stage automations endpoint (AJAX status codes)
3. Stage delete guard over AJAX
"""

from django.test import TestCase, Client
from django.urls import reverse

from apps.accounts.services import create_team_member, register_tenant
from apps.automations.models import AutomationTemplate
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline


class PipelineSettingsViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.member = create_team_member(self.tenant, 'Fox Mulder', 'fox@acme.com', 'secret123', 'member')
        self.stages = list(Pipeline.objects.for_tenant(self.tenant).get_stages())
        self.template = AutomationTemplate.objects.create(tenant=self.tenant, name='Welcome', message_template='hi')
        self.client.force_login(self.admin)

    def test_settings_page(self):
        response = self.client.get(reverse('pipeline:settings'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context['stages']), 6)
        self.assertContains(response, 'Welcome')

    def test_member_gets_403_over_ajax(self):
        self.client.force_login(self.member)

        response = self.client.post(
            reverse('pipeline:stage_automations', args=[self.stages[0].pk]),
            {'template_ids': [self.template.pk]},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 403)

    def test_set_stage_automations(self):
        response = self.client.post(
            reverse('pipeline:stage_automations', args=[self.stages[1].pk]),
            {'template_ids': [self.template.pk]},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.json(), {'success': True, 'template_ids': [self.template.pk]})

    def test_unknown_stage_404(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        foreign_stage = Pipeline.objects.for_tenant(other.tenant).get_stages().first()

        response = self.client.post(
            reverse('pipeline:stage_automations', args=[foreign_stage.pk]),
            {'template_ids': [self.template.pk]},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 404)

    def test_invalid_template_400(self):
        response = self.client.post(
            reverse('pipeline:stage_automations', args=[self.stages[1].pk]),
            {'template_ids': ['999999']},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Invalid automation template IDs')

    def test_delete_stage_with_deals_refused(self):
        create_deal(self.tenant, self.admin, 'Deal A')

        response = self.client.post(
            reverse('pipeline:stage_delete', args=[self.stages[0].pk]),
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('Cannot delete stage with 1 deals', response.json()['error'])

    def test_create_stage(self):
        response = self.client.post(reverse('pipeline:stage_create'), {
            'name': 'Demo',
            'position': 2,
            'probability_percent': 30,
            'color': '#123456',
        })

        self.assertRedirects(response, reverse('pipeline:settings'), fetch_redirect_response=False)
        self.assertTrue(Pipeline.objects.for_tenant(self.tenant).stages.filter(name='Demo').exists())
