import csv
import io
from datetime import date, datetime, timedelta

from django.core.management import call_command
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from admin_auth.tokens import TokenPayload, generate_token
from catalog.models import Addon, ServiceBundle
from service_requests.exports import CSV_BOM, build_requests_csv, export_filename, format_line_items
from service_requests.models import (
    ConfirmedOrderAddon,
    ConfirmedOrderBundle,
    ConfirmedOrderService,
    RequestItem,
    ServiceRequest,
)


def authenticate(client):
    token = generate_token(TokenPayload(user_id="admin-1", username="desk"))
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")


def make_request(order_id="CB001", status_value="sent", **extra):
    return ServiceRequest.objects.create(
        order_id=order_id,
        bike_name=extra.pop("bike_name", "Hero Sprint"),
        customer_name=extra.pop("customer_name", "Asha Rao"),
        phone_digits_intl="919876543210",
        status=status_value,
        **extra,
    )


def parse_csv(text):
    return list(csv.reader(io.StringIO(text[len(CSV_BOM):])))


class FormatLineItemsTests(SimpleTestCase):
    def test_with_and_without_pricing(self):
        entries = [("Brake tuning", 15000), ("Chain", 45050)]
        self.assertEqual(format_line_items(entries, True), "Brake tuning (INR 150); Chain (INR 451)")
        self.assertEqual(format_line_items(entries, False), "Brake tuning; Chain")
        self.assertEqual(format_line_items([], True), "")

    def test_missing_name(self):
        self.assertEqual(format_line_items([(None, 100)], False), "Unknown Item")

    def test_filename(self):
        self.assertEqual(
            export_filename(date(2024, 10, 1), date(2024, 10, 31)),
            "cyclebees_requests_2024-10-01_to_2024-10-31.csv",
        )


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class BuildRequestsCsvTests(TestCase):
    def setUp(self):
        self.sr = make_request(customer_name='Rao, "Asha"')
        RequestItem.objects.create(request=self.sr, section="repair", label="Brake tuning", price_paise=15000)
        RequestItem.objects.create(
            request=self.sr, section="replacement", label="Chain", price_paise=45000, position=1
        )

    def test_bom_headers_and_quoting(self):
        text = build_requests_csv(ServiceRequest.objects.all(), lacarte_paise=9900)
        self.assertTrue(text.startswith(CSV_BOM))
        self.assertFalse(text.endswith("\n"))
        self.assertIn('"Rao, ""Asha"""', text)

        rows = parse_csv(text)
        self.assertEqual(rows[0][:3], ["Order ID", "Customer Name", "Phone Number"])
        self.assertEqual(rows[0][-4:], ["Repair Services", "Replacement Parts", "Add-ons", "Bundles"])
        row = rows[1]
        self.assertEqual(row[1], 'Rao, "Asha"')
        self.assertEqual(row[2], "+919876543210")
        self.assertEqual(row[4], "Sent")
        self.assertEqual(row[7], "699")
        self.assertEqual(row[8], "Brake tuning (INR 150)")
        self.assertEqual(row[9], "Chain (INR 450)")

    def test_without_details(self):
        rows = parse_csv(build_requests_csv(ServiceRequest.objects.all(), include_details=False))
        self.assertEqual(len(rows[0]), 8)
        self.assertEqual(len(rows[1]), 8)

    def test_without_pricing(self):
        rows = parse_csv(build_requests_csv(ServiceRequest.objects.all(), include_pricing=False))
        self.assertEqual(rows[1][8], "Brake tuning")

    def test_confirmed_order_lists_addons_and_bundle(self):
        self.sr.status = ServiceRequest.Status.CONFIRMED
        self.sr.sent_at = timezone.make_aware(datetime(2024, 10, 2, 12, 0))
        self.sr.save()
        item = self.sr.items.get(label="Brake tuning")
        ConfirmedOrderService.objects.create(request=self.sr, service_item=item)
        addon = Addon.objects.create(name="Bike wash", price_paise=9900)
        bundle = ServiceBundle.objects.create(name="Tune-up", price_paise=99900)
        ConfirmedOrderAddon.objects.create(request=self.sr, addon=addon, price_paise=9900)
        ConfirmedOrderBundle.objects.create(request=self.sr, bundle=bundle, price_paise=99900)
        self.sr.recalculate_totals()

        row = parse_csv(build_requests_csv(ServiceRequest.objects.all(), lacarte_paise=9900))[1]
        self.assertEqual(row[4], "Confirmed")
        self.assertEqual(row[6], "02/10/2024")
        self.assertEqual(row[7], str(round((15000 + 9900 + 99900 + 9900) / 100)))
        self.assertEqual(row[10], "Bike wash (INR 99)")
        self.assertEqual(row[11], "Tune-up (INR 999)")


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class RequestExportViewTests(APITestCase):
    def setUp(self):
        authenticate(self.client)
        self.url = reverse("request-export")
        self.today = timezone.localdate()
        make_request(order_id="IN-RANGE")
        old = make_request(order_id="OLD")
        ServiceRequest.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=40))

    def test_csv_attachment(self):
        start = self.today - timedelta(days=7)
        res = self.client.get(self.url, {"start_date": start.isoformat(), "end_date": self.today.isoformat()})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res["Content-Type"].startswith("text/csv"))
        self.assertEqual(
            res["Content-Disposition"],
            f'attachment; filename="{export_filename(start, self.today)}"',
        )
        text = res.content.decode("utf-8")
        self.assertTrue(text.startswith(CSV_BOM))
        order_ids = [row[0] for row in parse_csv(text)[1:]]
        self.assertEqual(order_ids, ["IN-RANGE"])

    def test_include_flags(self):
        day = self.today.isoformat()
        res = self.client.get(self.url, {"start_date": day, "end_date": day, "include_details": "false"})
        header = parse_csv(res.content.decode("utf-8"))[0]
        self.assertNotIn("Repair Services", header)

    def test_missing_dates_400(self):
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reversed_range_400(self):
        res = self.client.get(self.url, {"start_date": "2024-10-31", "end_date": "2024-10-01"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_date", res.data)

    def test_requires_token(self):
        self.client.credentials()
        res = self.client.get(self.url, {"start_date": "2024-10-01", "end_date": "2024-10-31"})
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class RequestBillTests(APITestCase):
    def setUp(self):
        authenticate(self.client)
        self.sr = make_request(order_id="CB777")
        RequestItem.objects.create(request=self.sr, section="repair", label="Brake tuning", price_paise=15000)

    def test_estimate_bill(self):
        res = self.client.get(reverse("request-bill", args=[self.sr.id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res["Content-Type"].startswith("text/html"))
        self.assertEqual(res["Content-Disposition"], 'inline; filename="Service_Request_CB777.pdf"')
        html = res.content.decode("utf-8")
        self.assertIn("Service Estimate", html)
        self.assertIn("Brake tuning", html)
        self.assertIn("₹249", html)

    def test_confirmed_bill_uses_confirmed_rows(self):
        RequestItem.objects.create(request=self.sr, section="repair", label="Skipped wheel true", price_paise=5000)
        ConfirmedOrderService.objects.create(request=self.sr, service_item=self.sr.items.get(label="Brake tuning"))
        self.sr.status = ServiceRequest.Status.CONFIRMED
        self.sr.save()
        res = self.client.get(reverse("request-bill", args=[self.sr.id]))
        self.assertEqual(res["Content-Disposition"], 'inline; filename="Confirmed_Order_CB777.pdf"')
        html = res.content.decode("utf-8")
        self.assertIn("Confirmed Service Order", html)
        self.assertNotIn("Skipped wheel true", html)


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class ReconcileTotalsCommandTests(TestCase):
    def setUp(self):
        self.low = make_request(order_id="LOW", subtotal_paise=15000, total_paise=15000)
        self.ok = make_request(order_id="OK", subtotal_paise=15000, total_paise=24900)

    def test_dry_run_reports_without_writing(self):
        out = io.StringIO()
        call_command("reconcile_totals", "--dry-run", stdout=out)
        self.assertIn("LOW", out.getvalue())
        self.assertNotIn("OK (", out.getvalue())
        self.assertIn("Would fix 1 request(s).", out.getvalue())
        self.low.refresh_from_db()
        self.assertEqual(self.low.total_paise, 15000)

    def test_raises_low_totals(self):
        out = io.StringIO()
        call_command("reconcile_totals", stdout=out)
        self.assertIn("Fixed 1 request(s).", out.getvalue())
        self.low.refresh_from_db()
        self.ok.refresh_from_db()
        self.assertEqual(self.low.total_paise, 24900)
        self.assertEqual(self.ok.total_paise, 24900)
