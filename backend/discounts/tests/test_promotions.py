"""
Promotion Pricing Tests

Strategy selection, unit prices under active promotions and bundle lookup.
"""
import pytest
from decimal import Decimal
from datetime import timedelta
from types import SimpleNamespace

from django.core.exceptions import ValidationError
from django.utils import timezone

from core_backend.exceptions import InvalidInputError, InvalidReferenceError
from discounts.factories import PromotionStrategyFactory
from discounts.models import Promotion
from discounts.services import PromotionService
from discounts.strategies import (
    BundlePromotionStrategy,
    FixedPromotionStrategy,
    PercentagePromotionStrategy,
)
from menu.services import CatalogService


def promotion(promotion_type, value=None, bundle_price=None):
    return Promotion(type=promotion_type, value=value, bundle_price=bundle_price)


class TestStrategies:

    @pytest.mark.parametrize('promotion_type,strategy_class', [
        (Promotion.PromotionType.PERCENTAGE, PercentagePromotionStrategy),
        (Promotion.PromotionType.FIXED, FixedPromotionStrategy),
        (Promotion.PromotionType.BUNDLE, BundlePromotionStrategy),
    ])
    def test_factory_picks_strategy(self, promotion_type, strategy_class):
        assert isinstance(PromotionStrategyFactory.get_strategy(promotion(promotion_type)), strategy_class)

    def test_unknown_type(self):
        with pytest.raises(NotImplementedError):
            PromotionStrategyFactory.get_strategy(promotion('BOGO'))

    def test_percentage_unit_price(self):
        strategy = PercentagePromotionStrategy()

        assert strategy.unit_price(Decimal('8.99'), promotion('PERCENTAGE', Decimal('15'))) == Decimal('7.64')

    def test_fixed_never_below_zero(self):
        strategy = FixedPromotionStrategy()

        assert strategy.unit_price(Decimal('2.00'), promotion('FIXED', Decimal('5'))) == Decimal('0.00')

    def test_bundle_savings(self):
        lines = [SimpleNamespace(price=Decimal('8.99'), quantity=1), SimpleNamespace(price=Decimal('4.99'), quantity=1)]

        savings = BundlePromotionStrategy().savings(lines, promotion('BUNDLE', bundle_price=Decimal('10.99')))

        assert savings == Decimal('2.99')

    def test_percentage_savings(self):
        lines = [SimpleNamespace(price=Decimal('5.00'), quantity=3)]

        assert PercentagePromotionStrategy().savings(lines, promotion('PERCENTAGE', Decimal('20'))) == Decimal('3.00')


@pytest.mark.django_db
class TestPromotionService:

    def test_best_unit_price_picks_lowest(self, fries, fries_happy_hour):
        now = timezone.now()
        cheaper = Promotion.objects.create(
            name='Fries Dollar Off',
            type=Promotion.PromotionType.FIXED,
            value=Decimal('1.50'),
            start_date=now - timedelta(hours=1),
            end_date=now + timedelta(hours=1),
        )
        cheaper.menu_items.add(fries)

        assert PromotionService.best_unit_price(fries) == Decimal('3.50')

    def test_inactive_or_expired_promotions_ignored(self, fries, fries_happy_hour):
        assert PromotionService.best_unit_price(fries, now=timezone.now() + timedelta(days=1)) == Decimal('5.00')

        fries_happy_hour.is_active = False
        fries_happy_hour.save()
        assert PromotionService.best_unit_price(fries) == Decimal('5.00')

    def test_bundles_do_not_change_unit_price(self, pasta, pasta_combo):
        assert PromotionService.best_unit_price(pasta) == Decimal('8.99')

    def test_active_promotions_listed_through_catalog(self, fries_happy_hour, pasta_combo):
        names = {promo.name for promo in CatalogService.list_active_promotions()}

        assert names == {'Fries Happy Hour', 'Pasta Combo'}

    def test_get_bundle(self, pasta_combo):
        assert PromotionService.get_bundle(pasta_combo.pk) == pasta_combo

    def test_get_bundle_rejects_non_bundle(self, fries_happy_hour):
        with pytest.raises(InvalidInputError):
            PromotionService.get_bundle(fries_happy_hour.pk)

    def test_get_bundle_unknown(self, db):
        with pytest.raises(InvalidReferenceError):
            PromotionService.get_bundle(404)

    def test_clean_rejects_inverted_window(self):
        now = timezone.now()
        bad = Promotion(
            name='Backwards',
            type=Promotion.PromotionType.FIXED,
            value=Decimal('1'),
            start_date=now,
            end_date=now - timedelta(days=1),
        )

        with pytest.raises(ValidationError):
            bad.clean()
