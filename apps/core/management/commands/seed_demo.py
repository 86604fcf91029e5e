import random

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import ROLE_ADMIN, User
from apps.contacts.models import Company, Contact
from apps.core.models import Tenant
from apps.deals.models import Deal
from apps.deals.services import create_deal
from apps.pipeline.models import Pipeline


DEMO_TENANT_SLUG = 'demo'

CONTACT_NAMES = [
    ('Sarah', 'Johnson'),
    ('Michael', 'Chen'),
    ('Emily', 'Rodriguez'),
    ('David', 'Kim'),
    ('Jessica', 'Williams'),
    ('James', 'Brown'),
    ('Maria', 'Garcia'),
    ('Robert', 'Martinez'),
    ('Linda', 'Anderson'),
    ('William', 'Taylor'),
]

COMPANY_NAMES = [
    ('TechCorp Solutions', 'techcorp-solutions'),
    ('Global Innovations Inc', 'global-innovations-inc'),
    ('DataFlow Systems', 'dataflow-systems'),
    ('CloudMasters LLC', 'cloudmasters-llc'),
    ('NextGen Enterprises', 'nextgen-enterprises'),
]

DEAL_TITLES = [
    'Enterprise License',
    'Annual Support Contract',
    'Custom Integration',
    'Cloud Migration',
    'Security Audit',
    'Training Package',
    'API Access',
    'Premium Subscription',
    'Consulting Services',
    'Infrastructure Upgrade',
    'Data Analytics Platform',
    'Mobile App Development',
]


def _phone():
    return f'+1-555-{random.randint(100, 999)}-{random.randint(1000, 9999)}'


class Command(BaseCommand):
    help = 'Create a demo tenant with an admin user, the default pipeline and sample CRM data'

    def add_arguments(self, parser):
        parser.add_argument('--email', default='demo@demo.com', help='Demo admin email')
        parser.add_argument('--password', default='demo123', help='Demo admin password')

    @transaction.atomic
    def handle(self, *args, **options):
        tenant, created = Tenant.objects.get_or_create(
            slug=DEMO_TENANT_SLUG,
            defaults={'name': 'Demo Corp'},
        )
        if not created:
            tenant.backfill_entity_labels()
        self.stdout.write(f'  Tenant: {tenant.name}')

        user = User.objects.filter(email=options['email']).first()
        if user is None:
            user = User.objects.create_user(
                email=options['email'],
                password=options['password'],
                first_name='Demo',
                last_name='User',
                tenant=tenant,
                role=ROLE_ADMIN,
            )
        self.stdout.write(f'  User: {user.email}')

        pipeline = Pipeline.objects.for_tenant(tenant) or Pipeline.objects.create_default(tenant)
        stages = list(pipeline.get_stages())
        self.stdout.write(f'  Pipeline: {pipeline.name} ({len(stages)} stages)')

        if Deal.objects.filter(tenant=tenant).exists():
            self.stdout.write(self.style.WARNING('Demo data already present; skipped contacts, companies and deals'))
            return

        contacts = [
            Contact.objects.create(
                tenant=tenant,
                owner=user,
                first_name=first_name,
                last_name=last_name,
                email=f'{first_name.lower()}.{last_name.lower()}@email.com',
                phone=_phone(),
            )
            for first_name, last_name in CONTACT_NAMES
        ]

        companies = [
            Company.objects.create(
                tenant=tenant,
                owner=user,
                name=name,
                website=f'https://www.{slug}.com',
                phone=_phone(),
            )
            for name, slug in COMPANY_NAMES
        ]

        # Deals cycle through every stage, closed ones included
        for i, title in enumerate(DEAL_TITLES):
            create_deal(
                tenant,
                user,
                title,
                value_cents=random.randint(5000, 54999) * 100,
                stage=stages[i % len(stages)],
                contact=contacts[i % len(contacts)],
                company=companies[i] if i < len(companies) else None,
            )

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(contacts)} contacts, {len(companies)} companies and {len(DEAL_TITLES)} deals '
            f'for {tenant.name} (login: {user.email})'
        ))
