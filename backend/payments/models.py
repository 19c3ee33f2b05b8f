import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from orders.models import Order


class Payment(models.Model):
    """
    The settlement of a single Order. At most one exists per order, and
    creating it is what marks the order PAID.
    """

    class PaymentMethod(models.TextChoices):
        CASH = "CASH", _("Cash")
        CARD = "CARD", _("Card")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.OneToOneField(Order, on_delete=models.PROTECT, related_name="payment")
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Amount tendered by the customer."),
    )
    tip = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Tip included in the tender. Never taxed."),
    )
    total_due = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Order total including the tip at the time of settlement."),
    )
    change_due = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Amount handed back to the customer."),
    )
    method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments_processed",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Payment of {self.total_due} for Order #{self.order.order_number} ({self.get_method_display()})"
