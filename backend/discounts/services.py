"""
Promotion evaluation: which promotions are in effect and what they are worth.
"""

import logging
from decimal import Decimal

from django.db.models import Q
from django.utils import timezone

from core_backend.exceptions import InvalidInputError, InvalidReferenceError

from .factories import PromotionStrategyFactory
from .models import Promotion

logger = logging.getLogger(__name__)


class PromotionService:
    """Read-side service for promotions used by pricing."""

    @staticmethod
    def active_queryset(now=None):
        now = now or timezone.now()
        return Promotion.objects.filter(
            Q(is_active=True) & Q(start_date__lte=now) & Q(end_date__gte=now)
        )

    @staticmethod
    def list_active_promotions(now=None):
        return list(PromotionService.active_queryset(now).prefetch_related("menu_items"))

    @staticmethod
    def get_bundle(promotion_id, now=None) -> Promotion:
        """
        Fetch a bundle promotion that can be sold right now.

        Raises InvalidReferenceError for an unknown id and InvalidInputError for
        a promotion that is not a bundle or is outside its validity window.
        """
        try:
            promotion = Promotion.objects.prefetch_related("menu_items").get(pk=promotion_id)
        except (Promotion.DoesNotExist, ValueError, TypeError):
            raise InvalidReferenceError("Promotion", promotion_id)

        if promotion.type != Promotion.PromotionType.BUNDLE:
            raise InvalidInputError(
                f"Promotion '{promotion.name}' is not a bundle.", promotion_id=promotion.pk
            )
        if not promotion.is_effective(now):
            raise InvalidInputError(
                f"Promotion '{promotion.name}' is not currently active.", promotion_id=promotion.pk
            )
        if promotion.bundle_price is None:
            raise InvalidInputError(
                f"Bundle '{promotion.name}' has no bundle price.", promotion_id=promotion.pk
            )
        if not promotion.menu_items.exists():
            raise InvalidInputError(
                f"Bundle '{promotion.name}' has no menu items.", promotion_id=promotion.pk
            )
        return promotion

    @staticmethod
    def best_unit_prices(menu_items, now=None, currency="USD") -> dict:
        """
        Lowest unit price for each menu item among the active PERCENTAGE and
        FIXED promotions covering it, falling back to the catalog price.

        Returns a dict keyed by menu item id.
        """
        prices = {menu_item.pk: menu_item.price for menu_item in menu_items}
        if not prices:
            return prices

        promotions = (
            PromotionService.active_queryset(now)
            .filter(
                type__in=[Promotion.PromotionType.PERCENTAGE, Promotion.PromotionType.FIXED],
                menu_items__in=list(prices),
            )
            .distinct()
            .prefetch_related("menu_items")
        )

        by_id = {menu_item.pk: menu_item for menu_item in menu_items}
        for promotion in promotions:
            strategy = PromotionStrategyFactory.get_strategy(promotion)
            for covered in promotion.menu_items.all():
                if covered.pk not in by_id:
                    continue
                candidate = strategy.unit_price(by_id[covered.pk].price, promotion, currency)
                if candidate < prices[covered.pk]:
                    prices[covered.pk] = candidate
        return prices

    @staticmethod
    def best_unit_price(menu_item, now=None, currency="USD") -> Decimal:
        return PromotionService.best_unit_prices([menu_item], now, currency)[menu_item.pk]

    @staticmethod
    def savings_for(promotion: Promotion, lines, currency="USD") -> Decimal:
        strategy = PromotionStrategyFactory.get_strategy(promotion)
        return strategy.savings(lines, promotion, currency)
