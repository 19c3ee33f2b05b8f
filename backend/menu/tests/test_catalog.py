"""
Catalog Reader Tests
"""
import pytest

from core_backend.exceptions import InvalidInputError, InvalidReferenceError
from menu.services import CatalogService


@pytest.mark.django_db
class TestCatalogService:

    def test_get_menu_item(self, burger):
        assert CatalogService.get_menu_item(burger.pk) == burger

    def test_unknown_menu_item(self, db):
        with pytest.raises(InvalidReferenceError):
            CatalogService.get_menu_item(31337)

    def test_get_menu_items_keyed_by_id(self, burger, fries):
        found = CatalogService.get_menu_items([burger.pk, fries.pk, burger.pk])

        assert found == {burger.pk: burger, fries.pk: fries}

    def test_unavailable_item(self, unavailable_item):
        with pytest.raises(InvalidInputError):
            CatalogService.get_menu_items([unavailable_item.pk])

        assert CatalogService.get_menu_items([unavailable_item.pk], require_available=False)

    def test_unknown_allergy(self, peanut_allergy):
        with pytest.raises(InvalidReferenceError):
            CatalogService.get_allergies([peanut_allergy.pk, 999])

    def test_instant_flag(self, soda, burger):
        assert soda.is_instant
        assert not burger.is_instant
