"""
Order pricing calculator.

Pure arithmetic over an order's line items: no queries, no writes. Services
load the items, pass them in together with the configured tax rate, and
persist what comes back.

Every component is quantized to the currency's minor unit (ROUND_HALF_UP)
before it is summed, so ``total = subtotal - discount + tax + surcharges + tip``
holds exactly for the stored values.

Usage:
    from orders.calculators import OrderCalculator
    calculator = OrderCalculator(order.items.all(), tax_rate=Decimal("0.13"))
    totals = calculator.calculate_totals(
        discount_type=order.discount_type,
        discount_value=order.discount_value,
        surcharges=order.surcharges,
    )
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from payments.money import ZERO, quantize, to_decimal

FIXED = "FIXED"
PERCENTAGE = "PERCENTAGE"
HUNDRED = Decimal("100")


def line_total(price, quantity, currency: str = "USD") -> Decimal:
    """Snapshot unit price times quantity, quantized."""
    return quantize(currency, to_decimal(price) * int(quantity))


def bundle_savings(lines: Iterable, bundle_price, currency: str = "USD") -> Decimal:
    """
    Regular price of a bundle's lines minus the bundle price, never negative.

    ``lines`` are objects with ``price`` and ``quantity``.

    Examples:
        >>> from types import SimpleNamespace as Line
        >>> bundle_savings([Line(price="8.99", quantity=1), Line(price="4.99", quantity=1)], "10.99")
        Decimal('2.99')
    """
    regular_total = sum((line_total(line.price, line.quantity, currency) for line in lines), ZERO)
    savings = regular_total - to_decimal(bundle_price)
    return quantize(currency, max(savings, ZERO))


def discount_amount(discount_type: Optional[str], discount_value, subtotal, currency: str = "USD") -> Decimal:
    """
    Amount taken off the subtotal. Always between zero and the subtotal.

    Examples:
        >>> discount_amount("PERCENTAGE", Decimal("10"), Decimal("25.00"))
        Decimal('2.50')
        >>> discount_amount("FIXED", Decimal("40"), Decimal("25.00"))
        Decimal('25.00')
        >>> discount_amount(None, Decimal("5"), Decimal("25.00"))
        Decimal('0.00')
    """
    subtotal = to_decimal(subtotal)
    value = to_decimal(discount_value)
    if not discount_type or value <= 0 or subtotal <= 0:
        return quantize(currency, ZERO)

    if discount_type == FIXED:
        amount = value
    elif discount_type == PERCENTAGE:
        amount = subtotal * value / HUNDRED
    else:
        raise ValueError(f"Unknown discount type '{discount_type}'")

    return quantize(currency, min(amount, subtotal))


class OrderCalculator:
    """
    Calculator for a set of order lines.

    Lines are duck-typed: anything with ``price``, ``quantity`` and, for
    bundled lines, ``bundle_instance`` and ``bundle_price`` works, so the same
    arithmetic prices persisted OrderItems and unsaved previews.
    """

    def __init__(self, items: Iterable, tax_rate, currency: str = "USD"):
        self.items = list(items)
        self.tax_rate = to_decimal(tax_rate)
        self.currency = currency

    def calculate_subtotal(self) -> Decimal:
        """Sum of every line at its snapshot price (bundled lines at regular price)."""
        return sum(
            (line_total(item.price, item.quantity, self.currency) for item in self.items),
            quantize(self.currency, ZERO),
        )

    def bundle_groups(self) -> "OrderedDict[str, List]":
        """Bundled lines grouped by bundle instance, in order of first appearance."""
        groups: "OrderedDict[str, List]" = OrderedDict()
        for item in self.items:
            instance = getattr(item, "bundle_instance", "")
            if instance:
                groups.setdefault(instance, []).append(item)
        return groups

    def calculate_bundle_savings(self) -> Decimal:
        """Savings over every bundle instance present in the lines."""
        total = quantize(self.currency, ZERO)
        for lines in self.bundle_groups().values():
            total += bundle_savings(lines, lines[0].bundle_price, self.currency)
        return total

    def calculate_priced_subtotal(self) -> Decimal:
        """Subtotal with each bundle instance counted once at its bundle price."""
        return self.calculate_subtotal() - self.calculate_bundle_savings()

    def calculate_discount(self, discount_type, discount_value, subtotal: Optional[Decimal] = None) -> Decimal:
        if subtotal is None:
            subtotal = self.calculate_subtotal()
        return discount_amount(discount_type, discount_value, subtotal, self.currency)

    def calculate_tax(self, taxable_amount: Decimal) -> Decimal:
        """Tax on the post-discount subtotal."""
        return quantize(self.currency, to_decimal(taxable_amount) * self.tax_rate)

    def calculate_totals(
        self,
        discount_type: Optional[str] = None,
        discount_value=ZERO,
        surcharges=ZERO,
        tip=ZERO,
    ) -> Dict[str, Decimal]:
        """
        Compute every money component of the order.

        Returns a dict with subtotal, discount_amount, tax_amount, surcharges,
        tip_amount and total_amount, all quantized.
        """
        subtotal = self.calculate_subtotal()
        discount = self.calculate_discount(discount_type, discount_value, subtotal)
        tax = self.calculate_tax(subtotal - discount)
        surcharges = quantize(self.currency, surcharges)
        tip = quantize(self.currency, tip)

        return {
            "subtotal": subtotal,
            "discount_amount": discount,
            "tax_amount": tax,
            "surcharges": surcharges,
            "tip_amount": tip,
            "total_amount": subtotal - discount + tax + surcharges + tip,
        }
