"""
Settings Management Tests

The AppSettings singleton, and what happens to open orders when the tax
rate changes.
"""
import pytest
from decimal import Decimal

from orders.models import Order, OrderItem
from orders.services import OrderItemService, OrderService
from payments.models import Payment
from payments.services import PaymentService
from settings.config import AppSettings, app_settings
from settings.models import GlobalSettings


@pytest.mark.django_db
class TestAppSettings:

    def test_is_singleton(self):
        assert AppSettings() is app_settings

    def test_first_access_creates_default_row(self, settings):
        assert not GlobalSettings.objects.exists()

        rate = app_settings.tax_rate

        assert rate == Decimal(str(settings.POS_DEFAULT_TAX_RATE))
        assert GlobalSettings.objects.count() == 1
        assert app_settings.currency == settings.POS_CURRENCY

    def test_only_one_settings_row(self, global_settings):
        GlobalSettings(restaurant_name='Second').save()

        assert GlobalSettings.objects.count() == 1
        assert GlobalSettings.objects.get().restaurant_name == 'Second'

    def test_unknown_attribute(self, global_settings):
        with pytest.raises(AttributeError):
            app_settings.does_not_exist


@pytest.mark.django_db
class TestTaxRateChange:

    def test_saving_settings_reprices_open_orders(self, global_settings, burger, fries):
        order = OrderService.create_order(
            Order.OrderType.TO_GO,
            items=[{'menu_item_id': burger.pk, 'quantity': 2}, {'menu_item_id': fries.pk}],
        )
        assert order.total_amount == Decimal('28.25')

        global_settings.tax_rate = Decimal('0.10')
        global_settings.save()

        order.refresh_from_db()
        assert app_settings.tax_rate == Decimal('0.10')
        assert order.tax_amount == Decimal('2.50')
        assert order.total_amount == Decimal('27.50')

    def test_paid_orders_keep_their_totals(self, global_settings, burger):
        order = OrderService.create_order(Order.OrderType.TO_GO, items=[{'menu_item_id': burger.pk}])
        OrderItemService.transition_item_status(order.items.get().pk, OrderItem.ItemStatus.READY)
        PaymentService.settle_payment(order.pk, Decimal('11.30'), Payment.PaymentMethod.CASH)

        global_settings.tax_rate = Decimal('0.20')
        global_settings.save()

        order.refresh_from_db()
        assert order.tax_amount == Decimal('1.30')
        assert order.total_amount == Decimal('11.30')
