from django.core.management.base import BaseCommand

from apps.inspections.models import clear_all_data


class Command(BaseCommand):
    help = "Delete every locally stored record, including unsynced work and the pending queue"

    def add_arguments(self, parser):
        parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    def handle(self, *args, **options):
        if not options["yes"]:
            answer = input("This discards unsynced inspection work. Continue? [y/N] ")
            if answer.strip().lower() not in {"y", "yes"}:
                self.stdout.write("Aborted.")
                return

        counts = clear_all_data()
        total = sum(counts.values())
        self.stdout.write(self.style.SUCCESS(f"Deleted {total} record(s)"))
