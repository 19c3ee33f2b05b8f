from django.contrib import admin

from .models import GlobalSettings


@admin.register(GlobalSettings)
class GlobalSettingsAdmin(admin.ModelAdmin):
    """
    Admin view for the singleton GlobalSettings model. Saving a new tax rate
    reprices every open order.
    """

    list_display = ("restaurant_name", "tax_rate", "currency", "updated_at")
    readonly_fields = ("updated_at",)

    fieldsets = (
        ("Restaurant", {"fields": ("restaurant_name",)}),
        (
            "Financial Rules",
            {
                "fields": ("tax_rate", "currency"),
                "description": "Changes apply to every order that is still open.",
            },
        ),
        ("Timestamps", {"fields": ("updated_at",)}),
    )

    def has_add_permission(self, request):
        return not GlobalSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
