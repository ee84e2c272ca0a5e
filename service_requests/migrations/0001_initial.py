import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ServiceRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("order_id", models.CharField(max_length=100)),
                ("short_slug", models.CharField(editable=False, max_length=16, unique=True)),
                ("bike_name", models.CharField(max_length=200)),
                ("customer_name", models.CharField(max_length=200)),
                ("phone_digits_intl", models.CharField(max_length=15)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "pending"),
                            ("sent", "sent"),
                            ("viewed", "viewed"),
                            ("confirmed", "confirmed"),
                            ("cancelled", "cancelled"),
                        ],
                        default="sent",
                        max_length=20,
                    ),
                ),
                ("subtotal_paise", models.PositiveIntegerField(default=0)),
                ("tax_paise", models.PositiveIntegerField(default=0)),
                ("total_paise", models.PositiveIntegerField(default=0)),
                (
                    "lacarte_paise",
                    models.PositiveIntegerField(
                        blank=True, null=True, validators=[django.core.validators.MinValueValidator(0)]
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("viewed_at", models.DateTimeField(blank=True, null=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("whatsapp_message_id", models.CharField(blank=True, max_length=255, null=True)),
                ("whatsapp_sent_at", models.DateTimeField(blank=True, null=True)),
                ("whatsapp_error", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "requests",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="RequestItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "section",
                    models.CharField(choices=[("repair", "repair"), ("replacement", "replacement")], max_length=20),
                ),
                ("label", models.CharField(max_length=500)),
                (
                    "price_paise",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("is_suggested", models.BooleanField(default=True)),
                ("is_selected", models.BooleanField(default=False)),
                ("position", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="service_requests.servicerequest",
                    ),
                ),
            ],
            options={
                "db_table": "request_items",
                "ordering": ["position", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="ConfirmedOrderService",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="confirmed_services",
                        to="service_requests.servicerequest",
                    ),
                ),
                (
                    "service_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="confirmations",
                        to="service_requests.requestitem",
                    ),
                ),
            ],
            options={
                "db_table": "confirmed_order_services",
            },
        ),
        migrations.CreateModel(
            name="ConfirmedOrderAddon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price_paise", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "addon",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="confirmations",
                        to="catalog.addon",
                    ),
                ),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="confirmed_addons",
                        to="service_requests.servicerequest",
                    ),
                ),
            ],
            options={
                "db_table": "confirmed_order_addons",
            },
        ),
        migrations.CreateModel(
            name="ConfirmedOrderBundle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price_paise", models.PositiveIntegerField()),
                ("selected_at", models.DateTimeField(auto_now_add=True)),
                (
                    "bundle",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="confirmations",
                        to="catalog.servicebundle",
                    ),
                ),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="confirmed_bundles",
                        to="service_requests.servicerequest",
                    ),
                ),
            ],
            options={
                "db_table": "confirmed_order_bundles",
            },
        ),
        migrations.AddConstraint(
            model_name="confirmedorderservice",
            constraint=models.UniqueConstraint(fields=("request", "service_item"), name="uniq_confirmed_service"),
        ),
        migrations.AddConstraint(
            model_name="confirmedorderaddon",
            constraint=models.UniqueConstraint(fields=("request", "addon"), name="uniq_confirmed_addon"),
        ),
        migrations.AddConstraint(
            model_name="confirmedorderbundle",
            constraint=models.UniqueConstraint(fields=("request", "bundle"), name="uniq_confirmed_bundle"),
        ),
    ]
