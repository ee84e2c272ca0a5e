from unittest import mock

from django.db import DatabaseError
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from catalog.models import Addon, ServiceBundle
from public_orders.workflow import OrderWorkflow
from service_requests.models import (
    ConfirmedOrderAddon,
    ConfirmedOrderBundle,
    ConfirmedOrderService,
    RequestItem,
    ServiceRequest,
)


def make_order(status_value="sent"):
    service_request = ServiceRequest.objects.create(
        order_id="CB001",
        bike_name="Hero Sprint",
        customer_name="Asha Rao",
        phone_digits_intl="919876543210",
        status=status_value,
    )
    repair = RequestItem.objects.create(
        request=service_request, section="repair", label="Brake tuning", price_paise=15000, position=0
    )
    replacement = RequestItem.objects.create(
        request=service_request, section="replacement", label="Chain", price_paise=45000, position=1,
        is_suggested=False,
    )
    return service_request, repair, replacement


@override_settings(DEFAULT_LACARTE_PAISE=9900, SUPPORT_WHATSAPP_NUMBER="917005192650")
class PublicOrderTests(APITestCase):
    def setUp(self):
        self.sr, self.repair, self.replacement = make_order()

    def test_get_order_without_token(self):
        res = self.client.get(reverse("public-order", args=[self.sr.short_slug]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["request"]["order_id"], "CB001")
        self.assertNotIn("whatsapp_message_id", res.data["request"])
        self.assertEqual([i["label"] for i in res.data["items"]], ["Brake tuning", "Chain"])
        self.assertEqual(res.data["laCartePaise"], 9900)
        self.assertTrue(res.data["helpUrl"].startswith("https://wa.me/917005192650?text="))

    def test_unknown_slug_404(self):
        res = self.client.get(reverse("public-order", args=["nope1234"]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_view_marks_viewed_once(self):
        url = reverse("public-order-view", args=[self.sr.short_slug])
        res = self.client.post(url, {"selected_items": [str(self.repair.id)], "status": "viewed"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "viewed")
        self.assertTrue(res.data["updated"])

        res = self.client.post(url, {"selected_items": []}, format="json")
        self.assertFalse(res.data["updated"])
        self.repair.refresh_from_db()
        self.assertTrue(self.repair.is_selected)

    def test_view_requires_selected_items(self):
        res = self.client.post(reverse("public-order-view", args=[self.sr.short_slug]), {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("selected_items", res.data)

    def test_view_rejects_two_bundles(self):
        first = ServiceBundle.objects.create(name="A", price_paise=100)
        second = ServiceBundle.objects.create(name="B", price_paise=200)
        payload = {
            "selected_items": [str(self.repair.id)],
            "selected_bundles": [str(first.id), str(second.id)],
            "status": "confirmed",
        }
        res = self.client.post(reverse("public-order-view", args=[self.sr.short_slug]), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("selected_bundles", res.data)
        self.assertFalse(ConfirmedOrderBundle.objects.exists())

    def test_view_with_confirmed_status_confirms(self):
        addon = Addon.objects.create(name="Bike wash", price_paise=9900)
        payload = {
            "selected_items": [str(self.repair.id)],
            "selected_addons": [str(addon.id)],
            "status": "confirmed",
        }
        res = self.client.post(reverse("public-order-view", args=[self.sr.short_slug]), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "confirmed")
        self.assertEqual(res.data["totals"]["total"], 15000 + 9900 + 9900)
        self.sr.refresh_from_db()
        self.assertEqual(self.sr.status, ServiceRequest.Status.CONFIRMED)


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class SelectionFlowTests(APITestCase):
    def setUp(self):
        self.sr, self.repair, self.replacement = make_order()
        self.addon = Addon.objects.create(name="Bike wash", price_paise=9900)
        self.bundle = ServiceBundle.objects.create(name="Tune-up", price_paise=99900)
        self.selection_url = reverse("public-order-selection", args=[self.sr.short_slug])
        self.confirm_url = reverse("public-order-confirm", args=[self.sr.short_slug])

    def test_addons_step_before_services_409(self):
        res = self.client.get(self.selection_url, {"step": "addons"})
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["redirect"], "services")

    def test_unknown_step_400(self):
        res = self.client.get(self.selection_url, {"step": "payment"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_services_step_preselects_suggested(self):
        res = self.client.get(self.selection_url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["selection"]["items"], [str(self.repair.id)])
        self.assertEqual(res.data["totals"]["total"], 15000 + 9900)
        self.assertTrue(res.data["canConfirm"])
        self.assertFalse(res.data["readOnly"])

    def test_full_journey_in_session(self):
        res = self.client.post(
            self.selection_url, {"items": [str(self.repair.id), str(self.replacement.id)]}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        res = self.client.post(self.selection_url, {"addons": [str(self.addon.id)]}, format="json")
        self.assertEqual(res.data["selection"]["addons"], [str(self.addon.id)])
        self.assertEqual(len(res.data["selection"]["items"]), 2)

        res = self.client.get(self.selection_url, {"step": "bundles"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        res = self.client.post(self.confirm_url, {"bundle": str(self.bundle.id)}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["message"], "Order confirmed successfully!")
        self.assertEqual(res.data["request"]["status"], "confirmed")
        self.assertEqual(res.data["selection"]["bundle"], str(self.bundle.id))
        self.assertEqual(res.data["totals"]["total"], 15000 + 45000 + 9900 + 99900 + 9900)

        self.sr.refresh_from_db()
        self.assertEqual(self.sr.total_paise, 15000 + 45000 + 9900 + 99900 + 9900)

        res = self.client.get(self.selection_url, {"step": "addons"})
        self.assertTrue(res.data["readOnly"])
        self.assertFalse(res.data["canConfirm"])

        res = self.client.post(self.confirm_url, {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_selection_is_per_client_session(self):
        self.client.post(self.selection_url, {"items": [str(self.replacement.id)]}, format="json")
        other = self.client_class()
        res = other.get(self.selection_url)
        self.assertEqual(res.data["selection"]["items"], [str(self.repair.id)])

    def test_empty_selection_cannot_confirm(self):
        res = self.client.post(self.confirm_url, {"items": []}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["detail"], "Please select at least one service (La Carte included).")

    def test_cancelled_order_is_read_only(self):
        self.sr.status = ServiceRequest.Status.CANCELLED
        self.sr.save()
        res = self.client.post(self.selection_url, {"items": [str(self.repair.id)]}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_toggle_bundle_twice_clears_it(self):
        payload = {"toggle_bundle": str(self.bundle.id)}
        res = self.client.post(self.selection_url, payload, format="json")
        self.assertEqual(res.data["selection"]["bundle"], str(self.bundle.id))
        self.assertEqual(res.data["totals"]["bundlesTotal"], 99900)

        res = self.client.post(self.selection_url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIsNone(res.data["selection"]["bundle"])
        self.assertEqual(res.data["totals"]["bundlesTotal"], 0)

    def test_toggle_other_bundle_replaces_selected_one(self):
        other = ServiceBundle.objects.create(name="Overhaul", price_paise=149900)
        self.client.post(self.selection_url, {"toggle_bundle": str(self.bundle.id)}, format="json")
        res = self.client.post(self.selection_url, {"toggle_bundle": str(other.id)}, format="json")
        self.assertEqual(res.data["selection"]["bundle"], str(other.id))
        self.assertEqual(res.data["totals"]["bundlesTotal"], 149900)

    def test_toggle_items_and_addons(self):
        payload = {"toggle_items": [str(self.repair.id), str(self.replacement.id)], "toggle_addons": [str(self.addon.id)]}
        res = self.client.post(self.selection_url, payload, format="json")
        self.assertEqual(res.data["selection"]["items"], [str(self.replacement.id)])
        self.assertEqual(res.data["selection"]["addons"], [str(self.addon.id)])

        res = self.client.post(self.selection_url, {"toggle_addons": [str(self.addon.id)]}, format="json")
        self.assertEqual(res.data["selection"]["addons"], [])
        self.assertEqual(res.data["selection"]["items"], [str(self.replacement.id)])

    def test_confirm_failure_leaves_order_sent(self):
        with mock.patch.object(ConfirmedOrderService.objects, "bulk_create", side_effect=DatabaseError("boom")):
            res = self.client.post(self.confirm_url, {"addons": [str(self.addon.id)]}, format="json")
        self.assertEqual(res.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(res.data["detail"], "Failed to confirm order. Please try again.")
        self.sr.refresh_from_db()
        self.assertEqual(self.sr.status, ServiceRequest.Status.SENT)
        self.assertIsNone(self.sr.confirmed_at)
        self.assertFalse(ConfirmedOrderService.objects.exists())
        self.assertFalse(ConfirmedOrderAddon.objects.exists())

        res = self.client.get(self.selection_url)
        self.assertFalse(res.data["readOnly"])


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class PublicBillTests(APITestCase):
    def test_bill_only_after_confirmation(self):
        sr, repair, _ = make_order()
        url = reverse("public-order-bill", args=[sr.short_slug])
        res = self.client.get(url)
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

        self.client.post(reverse("public-order-confirm", args=[sr.short_slug]), {"items": [str(repair.id)]}, format="json")
        res = self.client.get(url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res["Content-Disposition"], 'inline; filename="Confirmed_Order_CB001.pdf"')
        self.assertIn("Brake tuning", res.content.decode("utf-8"))


@override_settings(DEFAULT_LACARTE_PAISE=9900)
class ViewFailureTests(APITestCase):
    def setUp(self):
        self.sr, self.repair, _ = make_order()
        self.url = reverse("public-order-view", args=[self.sr.short_slug])

    def test_failed_view_write_reports_stored_status(self):
        with mock.patch.object(OrderWorkflow, "_record_selected_items", side_effect=DatabaseError("down")):
            res = self.client.post(self.url, {"selected_items": [str(self.repair.id)]}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "sent")
        self.assertFalse(res.data["updated"])
        self.sr.refresh_from_db()
        self.assertEqual(self.sr.status, ServiceRequest.Status.SENT)
        self.assertIsNone(self.sr.viewed_at)

    def test_confirm_failure_through_view_endpoint(self):
        payload = {"selected_items": [str(self.repair.id)], "status": "confirmed"}
        with mock.patch.object(ConfirmedOrderService.objects, "bulk_create", side_effect=DatabaseError("boom")):
            res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(res.data["detail"], "Failed to confirm order. Please try again.")
        self.sr.refresh_from_db()
        self.assertEqual(self.sr.status, ServiceRequest.Status.SENT)
        self.assertFalse(ConfirmedOrderService.objects.exists())
