from django.core.management.base import BaseCommand

from apps.core.models import Tenant


class Command(BaseCommand):
    help = 'Fill empty entity labels of every tenant with the default labels'

    def handle(self, *args, **options):
        tenants = Tenant.objects.all()
        updated = 0

        for tenant in tenants:
            if tenant.backfill_entity_labels():
                updated += 1
                self.stdout.write(f'  Updated labels for {tenant.name}')

        self.stdout.write(self.style.SUCCESS(
            f'Backfilled entity labels for {updated} of {tenants.count()} tenant(s)'
        ))
