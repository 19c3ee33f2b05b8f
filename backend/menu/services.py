"""
Read-only access to the menu catalog for pricing and order validation.
"""

import logging

from core_backend.exceptions import InvalidInputError, InvalidReferenceError

from .models import Allergy, MenuItem

logger = logging.getLogger(__name__)


class CatalogService:
    """Looks up menu items, allergy tags and active promotions."""

    @staticmethod
    def get_menu_item(menu_item_id) -> MenuItem:
        try:
            return MenuItem.objects.get(pk=menu_item_id)
        except (MenuItem.DoesNotExist, ValueError, TypeError):
            raise InvalidReferenceError("Menu item", menu_item_id)

    @staticmethod
    def get_menu_items(menu_item_ids, require_available=True) -> dict:
        """
        Fetch several menu items in one query, keyed by id.

        Raises InvalidReferenceError for the first unknown id and, when
        ``require_available`` is set, InvalidInputError for an unavailable item.
        """
        ids = list(dict.fromkeys(menu_item_ids))
        try:
            found = MenuItem.objects.in_bulk(ids)
        except (ValueError, TypeError):
            raise InvalidInputError("Menu item ids must be integers.")

        for menu_item_id in ids:
            if menu_item_id not in found:
                raise InvalidReferenceError("Menu item", menu_item_id)
            menu_item = found[menu_item_id]
            if require_available and not menu_item.available:
                raise InvalidInputError(
                    f"'{menu_item.name}' is currently unavailable.", menu_item_id=menu_item_id
                )
        return found

    @staticmethod
    def get_allergies(allergy_ids) -> list:
        ids = list(dict.fromkeys(allergy_ids))
        if not ids:
            return []
        try:
            found = Allergy.objects.in_bulk(ids)
        except (ValueError, TypeError):
            raise InvalidInputError("Allergy ids must be integers.")
        missing = [allergy_id for allergy_id in ids if allergy_id not in found]
        if missing:
            raise InvalidReferenceError("Allergy", missing[0])
        return [found[allergy_id] for allergy_id in ids]

    @staticmethod
    def list_active_promotions(now=None):
        # Import here to avoid a circular dependency between menu and discounts
        from discounts.services import PromotionService

        return PromotionService.list_active_promotions(now)
