import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("menu", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Promotion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "type",
                    models.CharField(
                        choices=[("PERCENTAGE", "Percentage"), ("FIXED", "Fixed Amount"), ("BUNDLE", "Bundle")],
                        max_length=20,
                    ),
                ),
                (
                    "value",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Percentage or amount taken off each item. Not used for bundles.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                (
                    "bundle_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Flat price charged for the whole bundle.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                ("start_date", models.DateTimeField(help_text="The date and time when the promotion becomes active.")),
                ("end_date", models.DateTimeField(help_text="The date and time when the promotion expires.")),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="promotions_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("menu_items", models.ManyToManyField(blank=True, related_name="promotions", to="menu.menuitem")),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["is_active", "start_date", "end_date"], name="promo_active_window_idx")
                ],
            },
        ),
    ]
