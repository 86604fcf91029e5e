"""
Analytics Views Tests
=====================

Test Coverage:
1. Analytics page context
2. CSV and Excel export responses
3. Invalid export filters
4. Export tab summary and overview trends
"""

from django.test import TestCase, Client
from django.urls import reverse

from apps.accounts.services import create_team_member, register_tenant
from apps.analytics.services import EXPORT_HEADERS, export_filename
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline


class AnalyticsViewTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.member = create_team_member(self.tenant, 'Fox Mulder', 'fox@acme.com', 'secret123', 'member')
        create_deal(self.tenant, self.admin, 'Admin deal', value_cents=100000)
        create_deal(self.tenant, self.member, 'Member deal', value_cents=20000)

    def test_admin_overview(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('analytics:analytics'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['pipeline_value'], '$1,200.00')
        self.assertEqual(response.context['overview']['active_deal_count'], 2)
        self.assertIn('owner', response.context['export_form'].fields)

    def test_member_overview_limited_to_own_deals(self):
        self.client.force_login(self.member)

        response = self.client.get(reverse('analytics:analytics'))

        self.assertEqual(response.context['pipeline_value'], '$200.00')
        self.assertNotIn('owner', response.context['export_form'].fields)

    def test_csv_export(self):
        self.client.force_login(self.member)

        response = self.client.get(reverse('analytics:export'), {'format': 'csv'})

        self.assertEqual(response['Content-Type'], 'text/csv; charset=utf-8')
        self.assertEqual(
            response['Content-Disposition'],
            f'attachment; filename="{export_filename("csv")}"',
        )
        content = response.content.decode()
        self.assertTrue(content.startswith(','.join(EXPORT_HEADERS)))
        self.assertIn('Member deal', content)
        self.assertNotIn('Admin deal', content)

    def test_excel_export(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('analytics:export'), {'format': 'excel'})

        self.assertEqual(
            response['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        self.assertIn(export_filename('xlsx'), response['Content-Disposition'])
        # xlsx files are zip archives
        self.assertTrue(response.content.startswith(b'PK'))

    def test_invalid_date_range(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('analytics:export'), {
            'start_date': '2026-03-10',
            'end_date': '2026-03-01',
        })

        self.assertRedirects(response, reverse('analytics:analytics'), fetch_redirect_response=False)

    def test_export_tab_summarises_filtered_deals(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('analytics:analytics'), {'tab': 'export', 'owner': self.member.pk})

        summary = response.context['export_summary']
        self.assertEqual(summary['count'], 1)
        self.assertEqual(summary['open'], 1)
        self.assertEqual(summary['total_value_display'], '$200.00')

    def test_export_tab_without_filters_covers_visible_deals(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('analytics:analytics'), {'tab': 'export'})

        self.assertEqual(response.context['export_summary']['count'], 2)
        self.assertContains(response, 'Apply filters')

    def test_overview_lists_trends(self):
        won = Pipeline.objects.for_tenant(self.tenant).get_stages().get(is_won=True)
        create_deal(self.tenant, self.admin, 'Won deal', value_cents=50000, stage=won)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('analytics:analytics'))

        self.assertEqual(len(response.context['revenue_over_time']), 1)
        self.assertEqual(response.context['revenue_over_time'][0]['value_display'], '$500.00')
        self.assertEqual(response.context['win_rate_trend'][0]['win_rate'], 100)
        self.assertContains(response, 'Revenue over time')
