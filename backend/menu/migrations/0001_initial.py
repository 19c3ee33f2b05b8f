import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Allergy",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
            ],
            options={
                "verbose_name_plural": "allergies",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the menu category.", max_length=100, unique=True)),
                ("description", models.TextField(blank=True, help_text="Description of the category.")),
                (
                    "order",
                    models.IntegerField(
                        default=0, help_text="Display order for this category. Lower numbers appear first."
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "categories",
                "ordering": ["order", "name"],
            },
        ),
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the menu item.", max_length=200)),
                ("description", models.TextField(blank=True)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="The regular selling price.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "available",
                    models.BooleanField(
                        db_index=True, default=True, help_text="Unavailable items cannot be added to orders."
                    ),
                ),
                (
                    "fulfillment_station",
                    models.CharField(
                        choices=[
                            ("KITCHEN", "Kitchen"),
                            ("BAR", "Bar"),
                            ("DESSERT", "Dessert Station"),
                            ("NO_PREP", "No Preparation"),
                        ],
                        default="KITCHEN",
                        help_text="Where this item is prepared. NO_PREP items are handed over instantly.",
                        max_length=20,
                    ),
                ),
                ("allergies", models.ManyToManyField(blank=True, related_name="menu_items", to="menu.allergy")),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="menu_items",
                        to="menu.category",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
    ]
