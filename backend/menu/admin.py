from django.contrib import admin

from .models import Allergy, Category, MenuItem


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "order")
    list_editable = ("order",)
    search_fields = ("name",)
    ordering = ("order", "name")


@admin.register(Allergy)
class AllergyAdmin(admin.ModelAdmin):
    list_display = ("name", "description")
    search_fields = ("name",)


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """
    Admin configuration for the MenuItem model.
    """

    list_display = ("name", "category", "get_price_formatted", "fulfillment_station", "available")
    list_editable = ("available",)
    list_filter = ("fulfillment_station", "available", "category")
    search_fields = ("name", "description")
    autocomplete_fields = ("category",)
    filter_horizontal = ("allergies",)
    ordering = ("category__order", "name")

    fieldsets = (
        (None, {"fields": ("name", "description", "category")}),
        ("Pricing", {"fields": ("price", "available")}),
        ("Preparation", {"fields": ("fulfillment_station", "allergies")}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("category")

    @admin.display(ordering="price", description="Price")
    def get_price_formatted(self, obj):
        return f"${obj.price:,.2f}"
