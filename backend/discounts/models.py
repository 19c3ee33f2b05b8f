from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from menu.models import MenuItem


class Promotion(models.Model):
    class PromotionType(models.TextChoices):
        PERCENTAGE = "PERCENTAGE", "Percentage"
        FIXED = "FIXED", "Fixed Amount"
        BUNDLE = "BUNDLE", "Bundle"

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=PromotionType.choices)
    value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Percentage or amount taken off each item. Not used for bundles.",
    )
    bundle_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Flat price charged for the whole bundle.",
    )
    menu_items = models.ManyToManyField(MenuItem, related_name="promotions", blank=True)

    start_date = models.DateTimeField(help_text="The date and time when the promotion becomes active.")
    end_date = models.DateTimeField(help_text="The date and time when the promotion expires.")
    is_active = models.BooleanField(default=True, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="promotions_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active", "start_date", "end_date"], name="promo_active_window_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"

    def is_effective(self, now=None):
        """Active flag set and ``now`` inside the validity window, both ends inclusive."""
        if not self.is_active:
            return False
        now = now or timezone.now()
        return self.start_date <= now <= self.end_date

    def clean(self):
        super().clean()

        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date must be after the start date."})

        if self.type == self.PromotionType.BUNDLE:
            if self.bundle_price is None or self.bundle_price < 0:
                raise ValidationError({"bundle_price": "Bundle promotions require a bundle price."})
            return

        if self.value is None or self.value <= 0:
            raise ValidationError({"value": "Promotion value must be greater than zero."})

        if self.type == self.PromotionType.PERCENTAGE and self.value > Decimal("100"):
            raise ValidationError({"value": "Percentage promotion cannot exceed 100%."})
