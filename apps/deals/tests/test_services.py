"""
Deal Services Tests
===================

Test Coverage:
1. create_deal - default stage, foreign stage, missing pipeline
2. filter_deals - title / contact / company search
3. build_board - columns, counts and totals
"""

from django.test import TestCase

from apps.accounts.services import register_tenant
from apps.automations.engine import InvalidStageTransition
from apps.contacts.models import Company, Contact
from apps.core.models import Tenant
from apps.accounts.models import User
from apps.deals.models import Deal, format_cents
from apps.deals.services import DealError, build_board, create_deal, filter_deals
from apps.pipeline.models import Pipeline


class FormatCentsTest(TestCase):

    def test_thousands_separator(self):
        self.assertEqual(format_cents(12345678), '$123,456.78')

    def test_plain(self):
        self.assertEqual(format_cents(12345678, thousands=False), '$123456.78')

    def test_zero_and_none(self):
        self.assertEqual(format_cents(0), '$0.00')
        self.assertEqual(format_cents(None), '$0.00')


class CreateDealTest(TestCase):

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.pipeline = Pipeline.objects.for_tenant(self.tenant)

    def test_defaults_to_first_stage(self):
        deal = create_deal(self.tenant, self.admin, 'Big Deal', value_cents=1000)

        self.assertEqual(deal.pipeline, self.pipeline)
        self.assertEqual(deal.stage, self.pipeline.get_stages().first())
        self.assertEqual(deal.status, 'Open')

    def test_explicit_stage(self):
        won = self.pipeline.get_stages().get(is_won=True)

        deal = create_deal(self.tenant, self.admin, 'Closed', stage=won)

        self.assertEqual(deal.stage, won)
        self.assertEqual(deal.status, 'Won')

    def test_foreign_stage_rejected(self):
        other = register_tenant('Other Inc', 'Walter Skinner', 'walter@other.com', 'secret123')
        foreign_stage = Pipeline.objects.for_tenant(other.tenant).get_stages().first()

        with self.assertRaises(InvalidStageTransition):
            create_deal(self.tenant, self.admin, 'Nope', stage=foreign_stage)
        self.assertFalse(Deal.objects.exists())

    def test_tenant_without_pipeline(self):
        tenant = Tenant.objects.create(name='Empty Co')
        owner = User.objects.create_user(email='owner@empty.com', password='secret123', tenant=tenant)

        with self.assertRaisesMessage(DealError, 'No pipeline found'):
            create_deal(tenant, owner, 'Nope')


class FilterAndBoardTest(TestCase):

    def setUp(self):
        self.admin = register_tenant('Acme Corp', 'Dana Scully', 'dana@acme.com', 'secret123')
        self.tenant = self.admin.tenant
        self.pipeline = Pipeline.objects.for_tenant(self.tenant)
        self.stages = list(self.pipeline.get_stages())

        contact = Contact.objects.create(tenant=self.tenant, owner=self.admin, first_name='Ann', last_name='Lee')
        company = Company.objects.create(tenant=self.tenant, owner=self.admin, name='Globex')

        self.website = create_deal(self.tenant, self.admin, 'Website redesign', value_cents=500000)
        self.licence = create_deal(self.tenant, self.admin, 'Licence', value_cents=120000, contact=contact, stage=self.stages[2])
        self.support = create_deal(self.tenant, self.admin, 'Support plan', value_cents=30000, company=company, stage=self.stages[2])

    def test_search_by_title_contact_and_company(self):
        deals = Deal.objects.filter(tenant=self.tenant)

        self.assertEqual(list(filter_deals(deals, 'redesign')), [self.website])
        self.assertEqual(list(filter_deals(deals, 'lee')), [self.licence])
        self.assertEqual(list(filter_deals(deals, 'globex')), [self.support])

    def test_stage_filter(self):
        deals = filter_deals(Deal.objects.filter(tenant=self.tenant), stage=self.stages[2])

        self.assertEqual(set(deals), {self.licence, self.support})

    def test_board_columns(self):
        columns = build_board(self.pipeline, list(Deal.objects.filter(tenant=self.tenant)))

        self.assertEqual([column['stage'] for column in columns], self.stages)
        self.assertEqual(columns[0]['count'], 1)
        self.assertEqual(columns[0]['total_cents'], 500000)
        self.assertEqual(columns[2]['count'], 2)
        self.assertEqual(columns[2]['total_cents'], 150000)
        self.assertEqual(columns[1]['deals'], [])
