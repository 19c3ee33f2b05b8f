from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _


class Table(models.Model):
    """
    A dining table. Merged tables form a one-level star: satellites point at
    a primary through ``merged_with`` and a primary is never itself merged.
    """

    class TableStatus(models.TextChoices):
        VACANT = "VACANT", _("Vacant")
        OCCUPIED = "OCCUPIED", _("Occupied")
        RESERVED = "RESERVED", _("Reserved")
        ORDER_PENDING = "ORDER_PENDING", _("Order Pending")

    number = models.PositiveIntegerField(unique=True, help_text=_("Number shown on the floor plan."))
    capacity = models.PositiveIntegerField(
        default=4, validators=[MinValueValidator(1)], help_text=_("Number of seats at this table.")
    )
    status = models.CharField(
        max_length=20,
        choices=TableStatus.choices,
        default=TableStatus.VACANT,
        db_index=True,
    )
    merged_with = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="satellites",
        help_text=_("Primary table this table is merged into."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["number"]

    def __str__(self):
        return f"Table {self.number}"

    @property
    def is_satellite(self):
        return self.merged_with_id is not None

    @property
    def primary(self):
        return self.merged_with if self.is_satellite else self

    @property
    def effective_capacity(self):
        """Own seats plus every table currently merged into this one."""
        merged_seats = Table.objects.filter(merged_with_id=self.pk).aggregate(total=Sum("capacity"))["total"]
        return self.capacity + (merged_seats or 0)

    @property
    def seat_table_numbers(self):
        """Numbers of this table and its current satellites."""
        satellites = Table.objects.filter(merged_with_id=self.pk).values_list("number", flat=True)
        return [self.number, *satellites]
