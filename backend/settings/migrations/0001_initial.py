from decimal import Decimal

import django.core.validators
from django.db import migrations, models

import settings.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="GlobalSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("restaurant_name", models.CharField(default="Restaurant POS", max_length=100)),
                (
                    "tax_rate",
                    models.DecimalField(
                        decimal_places=4,
                        default=settings.models.default_tax_rate,
                        help_text="Sales tax applied to the discounted subtotal (e.g., 0.13 for 13%).",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("1")),
                        ],
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default=settings.models.default_currency,
                        help_text="Three-letter currency code (ISO 4217).",
                        max_length=3,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Global Settings",
                "verbose_name_plural": "Global Settings",
            },
        ),
    ]
