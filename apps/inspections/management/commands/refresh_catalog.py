from django.core.management.base import BaseCommand

from apps.inspections.services import CatalogService


class Command(BaseCommand):
    help = "Fetch products, workstations and defect types from the central API for offline use"

    def handle(self, *args, **options):
        results = CatalogService().refresh()
        for name, count in results.items():
            if count is None:
                self.stdout.write(self.style.WARNING(f"{name}: fetch failed, kept cached copy"))
            else:
                self.stdout.write(self.style.SUCCESS(f"{name}: cached {count}"))
