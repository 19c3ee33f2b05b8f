from abc import ABC, abstractmethod
from decimal import Decimal
import logging

from orders.calculators import bundle_savings
from payments.money import ZERO, quantize, to_decimal

from .models import Promotion

logger = logging.getLogger(__name__)


class PromotionStrategy(ABC):
    """The interface for a promotion pricing strategy."""

    @abstractmethod
    def unit_price(self, regular_price: Decimal, promotion: Promotion, currency: str = "USD") -> Decimal:
        """Price of one unit of a covered menu item under this promotion."""

    def savings(self, lines, promotion: Promotion, currency: str = "USD") -> Decimal:
        """Amount saved on ``lines`` compared with their regular price."""
        regular = sum((to_decimal(line.price) * line.quantity for line in lines), ZERO)
        promoted = sum(
            (self.unit_price(line.price, promotion, currency) * line.quantity for line in lines),
            ZERO,
        )
        return quantize(currency, max(regular - promoted, ZERO))


class PercentagePromotionStrategy(PromotionStrategy):
    """Takes a percentage off each covered item."""

    def unit_price(self, regular_price, promotion, currency="USD"):
        multiplier = Decimal("1") - to_decimal(promotion.value) / Decimal("100")
        return quantize(currency, max(to_decimal(regular_price) * multiplier, ZERO))


class FixedPromotionStrategy(PromotionStrategy):
    """Takes a fixed amount off each covered item, never below zero."""

    def unit_price(self, regular_price, promotion, currency="USD"):
        return quantize(currency, max(to_decimal(regular_price) - to_decimal(promotion.value), ZERO))


class BundlePromotionStrategy(PromotionStrategy):
    """
    Sells the promotion's items together at ``bundle_price``. Individual lines
    keep their regular price; the difference is applied as an order discount.
    """

    def unit_price(self, regular_price, promotion, currency="USD"):
        return quantize(currency, regular_price)

    def savings(self, lines, promotion, currency="USD"):
        savings = bundle_savings(lines, promotion.bundle_price, currency)
        logger.debug("Bundle %s saves %s", promotion.pk, savings)
        return savings
