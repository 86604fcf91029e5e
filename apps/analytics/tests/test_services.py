"""
Analytics Services Tests
========================

Test Coverage:
1. Overview: pipeline value, win rate window, sales velocity
2. Weighted forecast
3. Owner performance
4. Member visibility and export filters
5. CSV export layout and quoting
6. Monthly revenue and win-rate trends
7. Summary of the filtered export set
"""

from datetime import date, datetime, timedelta

from django.test import TestCase
from django.utils import timezone

from apps.accounts.services import create_team_member, register_tenant
from apps.analytics.services import (
    EXPORT_HEADERS,
    export_deals_csv,
    export_deals_workbook,
    export_filename,
    filter_export_deals,
    get_export_summary,
    get_forecast,
    get_overview,
    get_performance,
    get_revenue_over_time,
    get_win_rate_trend,
    tenant_stages,
    visible_deals,
)
from apps.contacts.models import Company, Contact
from apps.deals.models import Deal
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline


class AnalyticsTestMixin:

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.member = create_team_member(self.tenant, 'Fox Mulder', 'fox@acme.com', 'secret123', 'member')
        self.stages = {stage.name: stage for stage in Pipeline.objects.for_tenant(self.tenant).get_stages()}
        self.now = timezone.now()

    def make_deal(self, title, value_cents, stage_name, created_days_ago=0, updated_days_ago=0, owner=None):
        deal = create_deal(
            self.tenant, owner or self.admin, title,
            value_cents=value_cents, stage=self.stages[stage_name],
        )
        Deal.objects.filter(pk=deal.pk).update(
            created_at=self.now - timedelta(days=created_days_ago),
            updated_at=self.now - timedelta(days=updated_days_ago),
        )
        return deal


class MetricsTest(AnalyticsTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.make_deal('Open lead', 100000, 'Lead')
        self.make_deal('Open proposal', 300000, 'Proposal')
        self.make_deal('Recent win', 50000, 'Closed Won', created_days_ago=10.5)
        self.make_deal('Recent loss', 20000, 'Closed Lost', created_days_ago=5)
        self.make_deal('Old win', 70000, 'Closed Won', created_days_ago=200, updated_days_ago=150)
        self.deals = list(visible_deals(self.tenant, self.admin))

    def test_overview(self):
        overview = get_overview(self.deals, tenant_stages(self.tenant), now=self.now)

        self.assertEqual(overview['pipeline_value_cents'], 400000)
        self.assertEqual(overview['active_deal_count'], 2)
        self.assertEqual(overview['average_deal_cents'], 200000)
        # Only deals created in the last 90 days count towards the win rate
        self.assertEqual(overview['win_rate'], 50)
        self.assertEqual(overview['sales_velocity_days'], 10)

    def test_overview_by_stage_skips_closed_stages(self):
        overview = get_overview(self.deals, tenant_stages(self.tenant), now=self.now)

        rows = {row['stage'].name: row for row in overview['by_stage']}
        self.assertEqual(list(rows), ['Lead', 'Qualified', 'Proposal', 'Negotiation'])
        self.assertEqual(rows['Lead']['value_cents'], 100000)
        self.assertEqual(rows['Qualified']['count'], 0)
        self.assertEqual(rows['Proposal']['count'], 1)

    def test_empty_overview(self):
        overview = get_overview([], tenant_stages(self.tenant), now=self.now)

        self.assertEqual(overview['pipeline_value_cents'], 0)
        self.assertEqual(overview['average_deal_cents'], 0)
        self.assertEqual(overview['win_rate'], 0)
        self.assertEqual(overview['sales_velocity_days'], 0)

    def test_forecast(self):
        forecast = get_forecast(self.deals)

        self.assertEqual(len(forecast['rows']), 2)
        self.assertEqual(forecast['pipeline_value_cents'], 400000)
        # 1000.00 * 10% + 3000.00 * 50%
        self.assertEqual(forecast['weighted_value_cents'], 160000)

    def test_performance(self):
        self.make_deal('Member loss', 10000, 'Closed Lost', owner=self.member)
        performance = get_performance(visible_deals(self.tenant, self.admin))

        # Cycles of 10.5 and 50 days
        self.assertEqual(performance['average_cycle_days'], 30)
        self.assertEqual(len(performance['leaderboard']), 1)
        entry = performance['leaderboard'][0]
        self.assertEqual(entry['name'], 'Dana Scully')
        self.assertEqual(entry['won'], 2)
        self.assertEqual(entry['closed'], 3)
        self.assertEqual(entry['won_value_cents'], 120000)
        self.assertAlmostEqual(entry['win_rate'], 200 / 3)


class VisibilityAndExportTest(AnalyticsTestMixin, TestCase):

    def test_member_sees_own_deals_only(self):
        self.make_deal('Admin deal', 1000, 'Lead')
        own = self.make_deal('Member deal', 2000, 'Lead', owner=self.member)

        self.assertEqual(list(visible_deals(self.tenant, self.member)), [own])
        self.assertEqual(visible_deals(self.tenant, self.admin).count(), 2)

    def test_date_range_is_inclusive(self):
        deal = self.make_deal('March deal', 1000, 'Lead')
        Deal.objects.filter(pk=deal.pk).update(
            created_at=timezone.make_aware(datetime(2026, 3, 10, 12, 0))
        )
        self.make_deal('Today deal', 1000, 'Lead')
        deals = visible_deals(self.tenant, self.admin)

        filtered = filter_export_deals(deals, self.admin, start_date=date(2026, 3, 10), end_date=date(2026, 3, 10))

        self.assertEqual([d.title for d in filtered], ['March deal'])

    def test_owner_filter_ignored_for_members(self):
        self.make_deal('Member deal', 2000, 'Lead', owner=self.member)
        deals = visible_deals(self.tenant, self.member)

        filtered = filter_export_deals(deals, self.member, owner_id=self.admin.pk)

        self.assertEqual(filtered.count(), 1)

    def test_stage_filter(self):
        self.make_deal('Lead deal', 1000, 'Lead')
        self.make_deal('Won deal', 1000, 'Closed Won')

        filtered = filter_export_deals(
            visible_deals(self.tenant, self.admin), self.admin, stage_id=self.stages['Closed Won'].pk
        )

        self.assertEqual([d.title for d in filtered], ['Won deal'])

    def test_csv_export(self):
        contact = Contact.objects.create(tenant=self.tenant, owner=self.admin, first_name='Walter', last_name='Skinner')
        company = Company.objects.create(tenant=self.tenant, owner=self.admin, name='FBI')
        deal = create_deal(
            self.tenant, self.admin, 'Renewal, "Gold" plan',
            value_cents=123456, stage=self.stages['Closed Won'], contact=contact, company=company,
        )
        created = timezone.localtime(Deal.objects.get(pk=deal.pk).created_at).strftime('%Y-%m-%d')

        csv_text = export_deals_csv(visible_deals(self.tenant, self.admin))

        lines = csv_text.split('\n')
        self.assertEqual(lines[0], ','.join(EXPORT_HEADERS))
        self.assertEqual(
            lines[1],
            f'"Renewal, ""Gold"" plan",Closed Won,$1234.56,Dana Scully,Walter Skinner,FBI,{created},{created},Won',
        )
        self.assertFalse(csv_text.endswith('\n'))

    def test_csv_export_without_deals(self):
        self.assertEqual(export_deals_csv(Deal.objects.none()), ','.join(EXPORT_HEADERS))

    def test_workbook_export(self):
        self.make_deal('Lead deal', 1000, 'Lead')

        ws = export_deals_workbook(visible_deals(self.tenant, self.admin)).active

        self.assertEqual(ws.title, 'Deals')
        self.assertEqual(ws.cell(row=1, column=1).value, 'Deal Title')
        self.assertEqual(ws.cell(row=2, column=1).value, 'Lead deal')
        self.assertEqual(ws.cell(row=2, column=3).value, '$10.00')

    def test_export_filename(self):
        self.assertEqual(export_filename('csv', today=date(2026, 3, 10)), 'deals-export-2026-03-10.csv')
        self.assertEqual(export_filename('xlsx', today=date(2026, 3, 10)), 'deals-export-2026-03-10.xlsx')


class TrendsTest(AnalyticsTestMixin, TestCase):

    def make_dated_deal(self, title, value_cents, stage_name, year, month):
        deal = create_deal(self.tenant, self.admin, title, value_cents=value_cents, stage=self.stages[stage_name])
        Deal.objects.filter(pk=deal.pk).update(created_at=timezone.make_aware(datetime(year, month, 15, 12, 0)))
        return deal

    def test_revenue_over_time(self):
        self.make_dated_deal('Jan win', 10000, 'Closed Won', 2026, 1)
        self.make_dated_deal('Mar win', 20000, 'Closed Won', 2026, 3)
        self.make_dated_deal('Mar win 2', 5000, 'Closed Won', 2026, 3)
        self.make_dated_deal('Mar loss', 99900, 'Closed Lost', 2026, 3)
        self.make_dated_deal('Feb open', 99900, 'Lead', 2026, 2)

        revenue = get_revenue_over_time(visible_deals(self.tenant, self.admin))

        self.assertEqual(
            [(row['label'], row['value_cents']) for row in revenue],
            [('Jan 2026', 10000), ('Mar 2026', 25000)],
        )
        self.assertEqual(revenue[0]['month'], date(2026, 1, 1))

    def test_revenue_keeps_last_six_months(self):
        for month in range(1, 9):
            self.make_dated_deal(f'Win {month}', 1000 * month, 'Closed Won', 2025, month)

        revenue = get_revenue_over_time(visible_deals(self.tenant, self.admin))

        self.assertEqual([row['month'].month for row in revenue], [3, 4, 5, 6, 7, 8])

    def test_win_rate_trend(self):
        self.make_dated_deal('Jan win', 1000, 'Closed Won', 2026, 1)
        self.make_dated_deal('Jan loss', 1000, 'Closed Lost', 2026, 1)
        self.make_dated_deal('Jan loss 2', 1000, 'Closed Lost', 2026, 1)
        self.make_dated_deal('Feb win', 1000, 'Closed Won', 2026, 2)
        self.make_dated_deal('Feb open', 1000, 'Proposal', 2026, 2)

        trend = get_win_rate_trend(visible_deals(self.tenant, self.admin))

        self.assertEqual([row['label'] for row in trend], ['Jan 2026', 'Feb 2026'])
        self.assertEqual(trend[0]['deals'], 3)
        self.assertAlmostEqual(trend[0]['win_rate'], 100 / 3)
        self.assertEqual(trend[1]['deals'], 1)
        self.assertEqual(trend[1]['win_rate'], 100)

    def test_empty_trends(self):
        self.assertEqual(get_revenue_over_time([]), [])
        self.assertEqual(get_win_rate_trend([]), [])


class ExportSummaryTest(AnalyticsTestMixin, TestCase):

    def test_summary_counts_filtered_deals(self):
        self.make_deal('Open', 10000, 'Lead')
        self.make_deal('Won', 20000, 'Closed Won')
        self.make_deal('Lost', 5000, 'Closed Lost')
        self.make_deal('Member won', 40000, 'Closed Won', owner=self.member)

        summary = get_export_summary(visible_deals(self.tenant, self.admin))
        self.assertEqual(summary, {'total_value_cents': 75000, 'won': 2, 'lost': 1, 'open': 1, 'count': 4})

        filtered = filter_export_deals(visible_deals(self.tenant, self.admin), self.admin, owner_id=self.member.pk)
        self.assertEqual(
            get_export_summary(filtered),
            {'total_value_cents': 40000, 'won': 1, 'lost': 0, 'open': 0, 'count': 1},
        )

    def test_empty_summary(self):
        self.assertEqual(
            get_export_summary(Deal.objects.none()),
            {'total_value_cents': 0, 'won': 0, 'lost': 0, 'open': 0, 'count': 0},
        )
