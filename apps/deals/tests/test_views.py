"""
Deal Views Tests
================

Test Coverage:
1. Create - value in dollars stored as cents, custom fields saved
2. Move - AJAX JSON, invalid stage, plain form post
3. Edit - stage change runs automations
4. Kanban board and tenant isolation

Run tests:
    python manage.py test apps.deals.tests.test_views
"""

from django.core import mail
from django.test import TestCase, Client
from django.urls import reverse

from apps.accounts.services import register_tenant
from apps.activities.models import Activity
from apps.automations.models import AutomationTemplate
from apps.contacts.models import Contact
from apps.customfields.models import CustomField, OBJECT_TYPE_DEAL
from apps.customfields.services import create_custom_field, get_values, save_custom_field_values
from apps.deals.models import Deal
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline
from apps.pipeline.services import update_stage_automations


class DealViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.pipeline = Pipeline.objects.for_tenant(self.tenant)
        self.stages = list(self.pipeline.get_stages())
        self.contact = Contact.objects.create(
            tenant=self.tenant, owner=self.admin,
            first_name='Ann', last_name='Lee', email='ann@client.com',
        )
        self.deal = create_deal(self.tenant, self.admin, 'Big Deal', value_cents=10000, contact=self.contact)
        self.client.force_login(self.admin)

    def test_create_deal(self):
        field = create_custom_field(self.tenant, OBJECT_TYPE_DEAL, 'lead_source', 'Lead source', CustomField.FIELD_TEXT)

        response = self.client.post(reverse('deals:deal_create'), {
            'title': 'New Deal',
            'value': '1234.56',
            'stage': self.stages[1].pk,
            'contact': self.contact.pk,
            'cf_lead_source': 'Referral',
        })

        deal = Deal.objects.get(title='New Deal')
        self.assertRedirects(response, reverse('deals:deal_detail', args=[deal.pk]), fetch_redirect_response=False)
        self.assertEqual(deal.value_cents, 123456)
        self.assertEqual(deal.stage, self.stages[1])
        self.assertEqual(deal.owner, self.admin)
        self.assertEqual(get_values(self.tenant, OBJECT_TYPE_DEAL, deal.pk), {field.pk: 'Referral'})

    def test_move_ajax(self):
        template = AutomationTemplate.objects.create(
            tenant=self.tenant, name='Qualified', message_template='{deal_title} qualified',
        )
        update_stage_automations(self.tenant, self.stages[1].pk, [template.pk])

        response = self.client.post(
            reverse('deals:deal_move', args=[self.deal.pk]),
            {'stage': self.stages[1].pk},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        data = response.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['stage'], self.stages[1].pk)
        self.assertEqual(data['stage_name'], 'Qualified')
        self.assertEqual(data['deliveries'], [{'template': template.pk, 'status': 'sent', 'error': ''}])
        self.assertEqual(mail.outbox[0].body, 'Big Deal qualified')

    def test_move_to_invalid_stage(self):
        response = self.client.post(
            reverse('deals:deal_move', args=[self.deal.pk]),
            {'stage': 'abc'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])
        self.deal.refresh_from_db()
        self.assertEqual(self.deal.stage, self.stages[0])

    def test_move_form_post_redirects_to_next(self):
        response = self.client.post(reverse('deals:deal_move', args=[self.deal.pk]), {
            'stage': self.stages[2].pk,
            'next': self.deal.get_absolute_url(),
        })

        self.assertRedirects(response, self.deal.get_absolute_url(), fetch_redirect_response=False)
        self.deal.refresh_from_db()
        self.assertEqual(self.deal.stage, self.stages[2])

    def test_move_ignores_external_next(self):
        response = self.client.post(reverse('deals:deal_move', args=[self.deal.pk]), {
            'stage': self.stages[2].pk,
            'next': 'https://evil.example.com/',
        })

        self.assertRedirects(response, reverse('deals:deal_kanban'), fetch_redirect_response=False)

    def test_edit_stage_change_is_a_move(self):
        response = self.client.post(reverse('deals:deal_edit', args=[self.deal.pk]), {
            'title': 'Big Deal',
            'value': '100.00',
            'stage': self.stages[3].pk,
            'contact': self.contact.pk,
        })

        self.assertRedirects(response, self.deal.get_absolute_url(), fetch_redirect_response=False)
        note = Activity.objects.get(deal=self.deal)
        self.assertEqual(note.body, 'Stage changed from "Lead" to "Negotiation"')

    def test_kanban_renders_columns(self):
        response = self.client.get(reverse('deals:deal_kanban'))

        self.assertEqual(response.status_code, 200)
        columns = response.context['columns']
        self.assertEqual(len(columns), len(self.stages))
        self.assertEqual(columns[0]['total_display'], '$100.00')
        self.assertContains(response, 'data-deal="%d"' % self.deal.pk)

    def test_other_tenant_deal_not_found(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        self.client.force_login(other)

        response = self.client.get(reverse('deals:deal_detail', args=[self.deal.pk]))
        self.assertEqual(response.status_code, 404)

        response = self.client.post(reverse('deals:deal_move', args=[self.deal.pk]), {'stage': self.stages[1].pk})
        self.assertEqual(response.status_code, 404)

    def test_delete_removes_custom_values(self):
        field = create_custom_field(self.tenant, OBJECT_TYPE_DEAL, 'region', 'Region', CustomField.FIELD_TEXT)
        save_custom_field_values(self.tenant, OBJECT_TYPE_DEAL, self.deal.pk, {field.pk: 'EMEA'})

        self.client.post(reverse('deals:deal_delete', args=[self.deal.pk]))

        self.assertFalse(Deal.objects.filter(pk=self.deal.pk).exists())
        self.assertEqual(get_values(self.tenant, OBJECT_TYPE_DEAL, self.deal.pk), {})
