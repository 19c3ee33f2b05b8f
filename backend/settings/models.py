from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


def default_tax_rate():
    return settings.POS_DEFAULT_TAX_RATE


def default_currency():
    return settings.POS_CURRENCY


class GlobalSettings(models.Model):
    """
    Restaurant-wide configuration. A single row (pk=1) is kept; read it through
    ``settings.config.app_settings`` rather than querying this model directly.
    """

    SINGLETON_PK = 1

    restaurant_name = models.CharField(max_length=100, default="Restaurant POS")
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=default_tax_rate,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Sales tax applied to the discounted subtotal (e.g., 0.13 for 13%).",
    )
    currency = models.CharField(
        max_length=3,
        default=default_currency,
        help_text="Three-letter currency code (ISO 4217).",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Global Settings"
        verbose_name_plural = "Global Settings"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.restaurant_name} settings"
