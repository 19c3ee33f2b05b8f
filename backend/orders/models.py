import uuid
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.db.models import Max
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from menu.models import Allergy, MenuItem


class Order(models.Model):
    # --- Status Fields ---
    class OrderStatus(models.TextChoices):
        CREATED = "CREATED", _("Created")  # Taken, nothing started yet
        PREPARING = "PREPARING", _("Preparing")  # Kitchen has started at least one item
        READY = "READY", _("Ready")  # Every item is ready for hand-over
        SERVED = "SERVED", _("Served")  # Delivered to the table or picked up
        PAID = "PAID", _("Paid")  # Settled; terminal
        CANCELLED = "CANCELLED", _("Cancelled")  # Voided before payment; terminal

    class OrderType(models.TextChoices):
        DINE_IN = "DINE_IN", _("Dine In")
        TO_GO = "TO_GO", _("To Go")
        QUICK_SALE = "QUICK_SALE", _("Quick Sale")

    class DiscountType(models.TextChoices):
        FIXED = "FIXED", _("Fixed Amount")
        PERCENTAGE = "PERCENTAGE", _("Percentage")

    TERMINAL_STATUSES = (OrderStatus.PAID, OrderStatus.CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.PositiveIntegerField(
        unique=True,
        editable=False,
        help_text=_("Human-readable sequential order number."),
    )
    order_type = models.CharField(max_length=20, choices=OrderType.choices, default=OrderType.DINE_IN)
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.CREATED, db_index=True
    )
    table = models.ForeignKey(
        "tables.Table",
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )

    # --- To-go customer details ---
    customer_name = models.CharField(max_length=150, blank=True)
    customer_phone = models.CharField(max_length=30, blank=True)
    pickup_time = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    # --- Discount ---
    discount_type = models.CharField(
        max_length=20, choices=DiscountType.choices, null=True, blank=True
    )
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    discount_reason = models.CharField(max_length=255, blank=True)
    manual_discount_reason = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Reason given with the manual discount; kept while bundle savings come and go."),
    )
    discount_applied_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="discounts_applied",
    )
    bundle_savings = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Part of a FIXED discount_value that comes from bundle purchases."),
    )

    # --- Financial Fields (denormalized, recomputed on every change) ---
    surcharges = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Flat add-on such as a bag fee. Not taxed."),
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tip_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="order_status_created_idx"),
            models.Index(fields=["table", "status"], name="order_table_status_idx"),
        ]

    def __str__(self):
        return f"Order #{self.order_number} ({self.get_status_display()})"

    @property
    def is_closed(self):
        return self.status in self.TERMINAL_STATUSES

    def save(self, *args, **kwargs):
        # Generate order_number only if it's not already set
        if not self.order_number:
            max_retries = 5  # Prevent infinite loop in extreme race conditions
            for _attempt in range(max_retries):
                self.order_number = self._generate_sequential_order_number()
                try:
                    with transaction.atomic():
                        super().save(*args, **kwargs)
                    break
                except IntegrityError:
                    # Another request took the number, retry with the next one
                    self.order_number = None
                    continue
            else:
                raise IntegrityError("Failed to generate a unique order number after multiple retries.")
        else:
            if not self._state.adding:
                self.updated_at = timezone.now()
            super().save(*args, **kwargs)

    @staticmethod
    def _generate_sequential_order_number():
        last = Order.objects.aggregate(last=Max("order_number"))["last"]
        return (last or 0) + 1


class OrderItem(models.Model):
    class ItemStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")  # Not yet sent to preparation
        PREPARING = "PREPARING", _("Preparing")
        READY = "READY", _("Ready")
        SERVED = "SERVED", _("Served")

    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.PROTECT, related_name="order_items")
    quantity = models.PositiveIntegerField(default=1)
    status = models.CharField(
        max_length=10, choices=ItemStatus.choices, default=ItemStatus.PENDING
    )
    notes = models.TextField(
        blank=True, help_text=_("Customer notes, e.g., 'no onions'")
    )
    allergies = models.ManyToManyField(Allergy, blank=True, related_name="order_items")

    # Price snapshot
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Unit price of the menu item at the time it was ordered."),
    )

    # Bundle tracking: lines bought together as one bundle share an instance key
    promotion = models.ForeignKey(
        "discounts.Promotion",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    bundle_instance = models.CharField(max_length=32, blank=True, db_index=True)
    bundle_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Bundle price at the time of sale, repeated on every line of the bundle."),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "status"], name="item_order_status_idx"),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.menu_item.name} in Order {self.order.order_number}"

    @property
    def total_price(self):
        return self.quantity * self.price

    @property
    def is_bundled(self):
        return bool(self.bundle_instance)
