from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    name = models.CharField(
        max_length=100, unique=True, help_text=_("Name of the menu category.")
    )
    description = models.TextField(
        blank=True, help_text=_("Description of the category.")
    )
    order = models.IntegerField(
        default=0,
        help_text=_("Display order for this category. Lower numbers appear first."),
    )

    class Meta:
        verbose_name_plural = "categories"
        ordering = ["order", "name"]

    def __str__(self):
        return self.name


class Allergy(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name_plural = "allergies"
        ordering = ["name"]

    def __str__(self):
        return self.name


class MenuItem(models.Model):
    class FulfillmentStation(models.TextChoices):
        KITCHEN = "KITCHEN", _("Kitchen")
        BAR = "BAR", _("Bar")
        DESSERT = "DESSERT", _("Dessert Station")
        NO_PREP = "NO_PREP", _("No Preparation")

    name = models.CharField(max_length=200, help_text=_("Name of the menu item."))
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text=_("The regular selling price."),
    )
    category = models.ForeignKey(
        Category,
        related_name="menu_items",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    allergies = models.ManyToManyField(Allergy, blank=True, related_name="menu_items")
    available = models.BooleanField(
        default=True,
        db_index=True,
        help_text=_("Unavailable items cannot be added to orders."),
    )
    fulfillment_station = models.CharField(
        max_length=20,
        choices=FulfillmentStation.choices,
        default=FulfillmentStation.KITCHEN,
        help_text=_("Where this item is prepared. NO_PREP items are handed over instantly."),
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def is_instant(self):
        return self.fulfillment_station == self.FulfillmentStation.NO_PREP
