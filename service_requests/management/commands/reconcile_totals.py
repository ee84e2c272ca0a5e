from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import get_lacarte_price
from service_requests.models import ServiceRequest
from service_requests.totals import calculate_request_totals


class Command(BaseCommand):
    help = "Raise stored request totals that are below subtotal + La Carte."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Report without writing.")

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        lacarte = get_lacarte_price()
        fixed = 0
        with transaction.atomic():
            for service_request in ServiceRequest.objects.order_by("created_at").iterator():
                totals = calculate_request_totals(service_request, fallback_lacarte_paise=lacarte)
                if totals.total_paise <= service_request.total_paise:
                    continue
                fixed += 1
                self.stdout.write(
                    f"  {service_request.order_id} ({service_request.status}): "
                    f"{service_request.total_paise} → {totals.total_paise}"
                )
                if not dry_run:
                    ServiceRequest.objects.filter(pk=service_request.pk).update(total_paise=totals.total_paise)

        verb = "Would fix" if dry_run else "Fixed"
        self.stdout.write(self.style.SUCCESS(f"{verb} {fixed} request(s)."))
