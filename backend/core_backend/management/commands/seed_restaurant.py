"""
Django management command to set up a restaurant for first use.

Creates the allergy list, staff accounts for every role, the fixed set of
tables, a starter menu and a few bundle deals. Running it again only adds
what is missing.

Usage:
    python manage.py seed_restaurant
    python manage.py seed_restaurant --password s3cret --skip-users
    python manage.py seed_restaurant --tables 20
"""

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from discounts.models import Promotion
from menu.models import Allergy, Category, MenuItem
from settings.config import app_settings
from tables.models import Table
from users.models import User

ALLERGIES = ["Gluten", "Nuts", "Dairy", "Shellfish", "Eggs", "Soy", "Fish"]

STAFF = [
    ("owner@rms.com", "John", "Owner", User.Role.OWNER),
    ("supervisor@rms.com", "Sarah", "Supervisor", User.Role.SUPERVISOR),
    ("floor@rms.com", "Mike", "Waiter", User.Role.FLOOR_STAFF),
    ("kitchen@rms.com", "Chef", "Gordon", User.Role.KITCHEN_STAFF),
]

# Table number -> seats
TABLE_CAPACITIES = {1: 2, 2: 2, 3: 4, 4: 4, 5: 4, 6: 6, 7: 6, 8: 8, 9: 4, 10: 4}

KITCHEN = MenuItem.FulfillmentStation.KITCHEN
BAR = MenuItem.FulfillmentStation.BAR
DESSERT = MenuItem.FulfillmentStation.DESSERT
NO_PREP = MenuItem.FulfillmentStation.NO_PREP

# (category, description): [(name, price, station, allergies), ...]
MENU = {
    ("Starters", "Appetizers and small plates to begin"): [
        ("Bruschetta", "8.99", KITCHEN, ["Gluten"]),
        ("Garlic Shrimp", "14.99", KITCHEN, ["Shellfish"]),
        ("Spring Rolls", "7.99", KITCHEN, ["Gluten", "Soy"]),
    ],
    ("Mains", "Kitchen favourites"): [
        ("Classic Burger", "15.99", KITCHEN, ["Gluten", "Dairy", "Eggs"]),
        ("Spaghetti Carbonara", "18.99", KITCHEN, ["Gluten", "Dairy", "Eggs"]),
        ("Pad Thai", "17.99", KITCHEN, ["Nuts", "Shellfish", "Eggs", "Soy"]),
        ("Ribeye Steak", "34.99", KITCHEN, ["Dairy"]),
    ],
    ("Desserts", "Sweet endings"): [
        ("Chocolate Lava Cake", "9.99", DESSERT, ["Gluten", "Dairy", "Eggs"]),
        ("Tiramisu", "8.99", DESSERT, ["Gluten", "Dairy", "Eggs"]),
    ],
    ("Drinks", "Beverages and refreshments"): [
        ("House Lemonade", "4.99", BAR, []),
        ("Coffee", "3.49", BAR, []),
        ("Soft Drinks", "2.99", NO_PREP, []),
        ("Sparkling Water", "3.99", NO_PREP, []),
    ],
    ("Quick Grab", "Grab and go items - no wait!"): [
        ("Bottled Water", "1.99", NO_PREP, []),
        ("Fresh Cookie", "2.49", NO_PREP, ["Gluten", "Dairy", "Eggs", "Nuts"]),
    ],
}

# (name, description, bundle price, items)
BUNDLES = [
    ("Meal Deal", "Bruschetta + House Lemonade combo", "12.99", ["Bruschetta", "House Lemonade"]),
    ("Burger Combo", "Classic Burger + Soft Drink", "17.49", ["Classic Burger", "Soft Drinks"]),
    ("Surf & Turf", "Ribeye Steak + Garlic Shrimp", "44.99", ["Ribeye Steak", "Garlic Shrimp"]),
    ("Dessert Duo", "Chocolate Lava Cake + Tiramisu", "14.99", ["Chocolate Lava Cake", "Tiramisu"]),
]


class Command(BaseCommand):
    help = "Seed allergies, staff, tables, a starter menu and bundle deals"

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default="password123",
            help="Password for the seeded staff accounts (default: password123)",
        )
        parser.add_argument(
            "--skip-users",
            action="store_true",
            help="Do not create staff accounts",
        )
        parser.add_argument(
            "--tables",
            type=int,
            default=len(TABLE_CAPACITIES),
            help=f"Number of tables to create (default: {len(TABLE_CAPACITIES)})",
        )

    def handle(self, *args, **options):
        if options["tables"] <= 0:
            raise CommandError("Number of tables must be greater than 0")

        # Creates the settings row with project defaults on a fresh database
        app_settings.reload()

        with transaction.atomic():
            allergies = self.seed_allergies()
            owner = None
            if not options["skip_users"]:
                owner = self.seed_users(options["password"])
            self.seed_tables(options["tables"])
            items = self.seed_menu(allergies)
            self.seed_bundles(items, owner)

        self.stdout.write(self.style.SUCCESS("Restaurant seeded"))

    def seed_allergies(self):
        allergies = {}
        for name in ALLERGIES:
            allergies[name], _ = Allergy.objects.get_or_create(name=name)
        self.stdout.write(f"  Allergies: {len(allergies)}")
        return allergies

    def seed_users(self, password):
        owner = None
        created = 0
        for email, first_name, last_name, role in STAFF:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(
                    email,
                    password=password,
                    first_name=first_name,
                    last_name=last_name,
                    role=role,
                    is_staff=role in (User.Role.OWNER, User.Role.SUPERVISOR),
                )
                created += 1
            if role == User.Role.OWNER:
                owner = user
        self.stdout.write(f"  Staff accounts created: {created}")
        return owner

    def seed_tables(self, count):
        created = 0
        for number in range(1, count + 1):
            _, was_created = Table.objects.get_or_create(
                number=number, defaults={"capacity": TABLE_CAPACITIES.get(number, 4)}
            )
            created += was_created
        self.stdout.write(f"  Tables created: {created}")

    def seed_menu(self, allergies):
        items = {}
        for position, ((category_name, description), entries) in enumerate(MENU.items(), start=1):
            category, _ = Category.objects.get_or_create(
                name=category_name, defaults={"description": description, "order": position}
            )
            for name, price, station, allergy_names in entries:
                item, created = MenuItem.objects.get_or_create(
                    name=name,
                    category=category,
                    defaults={"price": Decimal(price), "fulfillment_station": station},
                )
                if created:
                    item.allergies.set([allergies[allergy] for allergy in allergy_names])
                items[name] = item
        self.stdout.write(f"  Menu items: {len(items)}")
        return items

    def seed_bundles(self, items, owner):
        # Permanent deals
        start = timezone.now() - timedelta(days=1)
        end = start + timedelta(days=365 * 10)
        created = 0
        for name, description, bundle_price, item_names in BUNDLES:
            if Promotion.objects.filter(name=name, type=Promotion.PromotionType.BUNDLE).exists():
                continue
            promotion = Promotion(
                name=name,
                description=description,
                type=Promotion.PromotionType.BUNDLE,
                bundle_price=Decimal(bundle_price),
                start_date=start,
                end_date=end,
                created_by=owner,
            )
            promotion.full_clean()
            promotion.save()
            promotion.menu_items.set([items[item_name] for item_name in item_names])
            created += 1
        self.stdout.write(f"  Bundle deals created: {created}")
