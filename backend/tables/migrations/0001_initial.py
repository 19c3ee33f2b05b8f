import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Table",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.PositiveIntegerField(help_text="Number shown on the floor plan.", unique=True)),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        default=4,
                        help_text="Number of seats at this table.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("VACANT", "Vacant"),
                            ("OCCUPIED", "Occupied"),
                            ("RESERVED", "Reserved"),
                            ("ORDER_PENDING", "Order Pending"),
                        ],
                        db_index=True,
                        default="VACANT",
                        max_length=20,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "merged_with",
                    models.ForeignKey(
                        blank=True,
                        help_text="Primary table this table is merged into.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="satellites",
                        to="tables.table",
                    ),
                ),
            ],
            options={
                "ordering": ["number"],
            },
        ),
    ]
