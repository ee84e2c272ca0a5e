import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Addon",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("price_paise", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(0)])),
                ("is_active", models.BooleanField(default=True)),
                ("display_order", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "addons",
                "ordering": ["display_order", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="ServiceBundle",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, null=True)),
                ("price_paise", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(0)])),
                ("bullet_points", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(default=True)),
                ("display_order", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "service_bundles",
                "ordering": ["display_order", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="LaCarteSettings",
            fields=[
                ("id", models.CharField(default="lacarte", editable=False, max_length=20, primary_key=True, serialize=False)),
                ("real_price_paise", models.PositiveIntegerField()),
                ("current_price_paise", models.PositiveIntegerField()),
                ("discount_note", models.CharField(blank=True, default="", max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "lacarte_settings",
                "verbose_name_plural": "La Carte settings",
            },
        ),
    ]
