"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like staff users, tables, menu items and promotions.
"""
import pytest
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone

from users.models import User
from menu.models import Allergy, Category, MenuItem
from tables.models import Table
from discounts.models import Promotion
from settings.models import GlobalSettings


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def global_settings(db):
    """Restaurant settings with a 13% tax rate in USD."""
    settings_obj, _ = GlobalSettings.objects.update_or_create(
        pk=GlobalSettings.SINGLETON_PK,
        defaults={
            'restaurant_name': 'Test Bistro',
            'tax_rate': Decimal('0.13'),
            'currency': 'USD',
        },
    )
    return settings_obj


# ============================================================================
# USER FIXTURES
# ============================================================================

def _make_user(email, role):
    return User.objects.create_user(
        email=email,
        password='testpass123',
        first_name=email.split('@')[0].title(),
        last_name='Tester',
        role=role,
    )


@pytest.fixture
def owner(db):
    return _make_user('owner@test.com', User.Role.OWNER)


@pytest.fixture
def supervisor(db):
    return _make_user('supervisor@test.com', User.Role.SUPERVISOR)


@pytest.fixture
def floor_staff(db):
    return _make_user('floor@test.com', User.Role.FLOOR_STAFF)


@pytest.fixture
def kitchen_staff(db):
    return _make_user('kitchen@test.com', User.Role.KITCHEN_STAFF)


# ============================================================================
# TABLE FIXTURES
# ============================================================================

@pytest.fixture
def table_1(db):
    return Table.objects.create(number=1, capacity=4)


@pytest.fixture
def table_2(db):
    return Table.objects.create(number=2, capacity=2)


@pytest.fixture
def table_3(db):
    return Table.objects.create(number=3, capacity=6)


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def mains_category(db):
    return Category.objects.create(name='Mains')


@pytest.fixture
def peanut_allergy(db):
    return Allergy.objects.create(name='Peanuts')


@pytest.fixture
def burger(mains_category):
    """Kitchen item at 10.00"""
    return MenuItem.objects.create(
        name='Burger',
        price=Decimal('10.00'),
        category=mains_category,
        fulfillment_station=MenuItem.FulfillmentStation.KITCHEN,
    )


@pytest.fixture
def fries(mains_category):
    """Kitchen item at 5.00"""
    return MenuItem.objects.create(
        name='Fries',
        price=Decimal('5.00'),
        category=mains_category,
        fulfillment_station=MenuItem.FulfillmentStation.KITCHEN,
    )


@pytest.fixture
def cocktail(db):
    """Bar item at 9.00"""
    return MenuItem.objects.create(
        name='Negroni',
        price=Decimal('9.00'),
        fulfillment_station=MenuItem.FulfillmentStation.BAR,
    )


@pytest.fixture
def soda(db):
    """Instant (NO_PREP) item at 2.50"""
    return MenuItem.objects.create(
        name='Soda',
        price=Decimal('2.50'),
        fulfillment_station=MenuItem.FulfillmentStation.NO_PREP,
    )


@pytest.fixture
def pasta(mains_category):
    return MenuItem.objects.create(
        name='Pasta',
        price=Decimal('8.99'),
        category=mains_category,
        fulfillment_station=MenuItem.FulfillmentStation.KITCHEN,
    )


@pytest.fixture
def tiramisu(db):
    return MenuItem.objects.create(
        name='Tiramisu',
        price=Decimal('4.99'),
        fulfillment_station=MenuItem.FulfillmentStation.DESSERT,
    )


@pytest.fixture
def unavailable_item(db):
    return MenuItem.objects.create(
        name='Seasonal Soup',
        price=Decimal('6.00'),
        available=False,
    )


# ============================================================================
# PROMOTION FIXTURES
# ============================================================================

@pytest.fixture
def pasta_combo(pasta, tiramisu):
    """Pasta (8.99) + Tiramisu (4.99) sold together for 10.99"""
    now = timezone.now()
    promotion = Promotion.objects.create(
        name='Pasta Combo',
        type=Promotion.PromotionType.BUNDLE,
        bundle_price=Decimal('10.99'),
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=30),
    )
    promotion.menu_items.set([pasta, tiramisu])
    return promotion


@pytest.fixture
def fries_happy_hour(fries):
    """20% off fries"""
    now = timezone.now()
    promotion = Promotion.objects.create(
        name='Fries Happy Hour',
        type=Promotion.PromotionType.PERCENTAGE,
        value=Decimal('20.00'),
        start_date=now - timedelta(hours=1),
        end_date=now + timedelta(hours=2),
    )
    promotion.menu_items.add(fries)
    return promotion


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def client_for(api_client):
    """
    Authenticate the shared API client as the given user.

    Usage:
        def test_endpoint(client_for, floor_staff):
            client = client_for(floor_staff)
            response = client.get('/api/orders/')
    """
    def _authenticate(user):
        api_client.force_authenticate(user=user)
        return api_client
    return _authenticate
