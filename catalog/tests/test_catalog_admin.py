from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from admin_auth.tokens import TokenPayload, generate_token
from catalog.models import Addon, LaCarteSettings, ServiceBundle
from service_requests.models import ConfirmedOrderAddon, ServiceRequest


def admin_token():
    return generate_token(TokenPayload(user_id="admin-1", username="desk"))


class AddonAdminTests(APITestCase):
    def setUp(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {admin_token()}")
        self.addon = Addon.objects.create(name="Bike wash", price_paise=9900)

    def test_requires_token(self):
        self.client.credentials()
        res = self.client.get(reverse("addon-list-create"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_includes_inactive(self):
        Addon.objects.create(name="Retired", price_paise=100, is_active=False)
        res = self.client.get(reverse("addon-list-create"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data), 2)

    def test_create_addon(self):
        payload = {"name": "Chain lube", "description": "Dry lube", "price_paise": 4900, "display_order": 3}
        res = self.client.post(reverse("addon-list-create"), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["name"], "Chain lube")
        self.assertTrue(res.data["is_active"])
        self.assertEqual(Addon.objects.count(), 2)

    def test_create_rejects_negative_price_and_empty_name(self):
        res = self.client.post(reverse("addon-list-create"), {"name": "", "price_paise": -1}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("name", res.data)
        self.assertIn("price_paise", res.data)

    def test_patch_deactivates(self):
        res = self.client.patch(reverse("addon-detail", args=[self.addon.id]), {"is_active": False}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.addon.refresh_from_db()
        self.assertFalse(self.addon.is_active)

    def test_delete_unused_addon(self):
        res = self.client.delete(reverse("addon-detail", args=[self.addon.id]))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Addon.objects.exists())

    def test_delete_addon_of_confirmed_order_409(self):
        order = ServiceRequest.objects.create(
            order_id="CB1", bike_name="Hero", customer_name="Asha", phone_digits_intl="919876543210",
            status=ServiceRequest.Status.CONFIRMED,
        )
        ConfirmedOrderAddon.objects.create(request=order, addon=self.addon, price_paise=9900)
        res = self.client.delete(reverse("addon-detail", args=[self.addon.id]))
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Addon.objects.filter(pk=self.addon.pk).exists())

    def test_unknown_addon_404(self):
        res = self.client.get(reverse("addon-detail", args=["00000000-0000-0000-0000-000000000000"]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)


class BundleAdminTests(APITestCase):
    def setUp(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {admin_token()}")

    def test_create_bundle_with_bullet_points(self):
        payload = {"name": "Tune-up", "price_paise": 99900, "bullet_points": [" Gear tuning ", "Brake check"]}
        res = self.client.post(reverse("bundle-list-create"), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["bullet_points"], ["Gear tuning", "Brake check"])

    def test_bullet_points_must_be_non_empty_strings(self):
        for bad in (["ok", ""], ["ok", 3], "not a list"):
            payload = {"name": "Tune-up", "price_paise": 99900, "bullet_points": bad}
            res = self.client.post(reverse("bundle-list-create"), payload, format="json")
            self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST, bad)
            self.assertIn("bullet_points", res.data)

    def test_put_replaces_bundle(self):
        bundle = ServiceBundle.objects.create(name="Old", price_paise=100)
        payload = {"name": "New", "price_paise": 200, "bullet_points": ["a"], "is_active": True, "display_order": 1}
        res = self.client.put(reverse("bundle-detail", args=[bundle.id]), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        bundle.refresh_from_db()
        self.assertEqual(bundle.name, "New")
        self.assertEqual(bundle.bullet_points, ["a"])


class LaCarteSettingsAdminTests(APITestCase):
    def setUp(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {admin_token()}")
        self.url = reverse("lacarte-settings")

    def test_put_creates_then_updates_singleton(self):
        payload = {"real_price_paise": 29900, "current_price_paise": 9900, "discount_note": "Launch offer"}
        res = self.client.put(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["id"], "lacarte")

        payload["current_price_paise"] = 14900
        res = self.client.put(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(LaCarteSettings.objects.count(), 1)
        self.assertEqual(LaCarteSettings.objects.get().current_price_paise, 14900)

    def test_put_rejects_negative_price(self):
        res = self.client.put(self.url, {"real_price_paise": -1, "current_price_paise": 0}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("real_price_paise", res.data)

    def test_requires_token(self):
        self.client.credentials()
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
