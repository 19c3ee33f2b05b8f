from django.contrib import admin

from .models import Promotion


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    """
    Admin interface for managing promotions and bundle deals.
    """

    list_display = (
        "name",
        "type",
        "value",
        "bundle_price",
        "is_active",
        "start_date",
        "end_date",
    )
    list_filter = ("type", "is_active")
    search_fields = ("name",)
    ordering = ("name",)

    fieldsets = (
        (None, {"fields": ("name", "description", "is_active")}),
        ("Rule", {"fields": ("type", "value", "bundle_price")}),
        ("Applicability", {"fields": ("menu_items",)}),
        ("Timeframe", {"fields": ("start_date", "end_date")}),
        (
            "Audit",
            {
                "fields": ("created_by", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    filter_horizontal = ("menu_items",)
    readonly_fields = ("created_by", "created_at", "updated_at")

    actions = ["deactivate_selected"]

    @admin.action(description="Deactivate selected promotions")
    def deactivate_selected(self, request, queryset):
        count = queryset.filter(is_active=True).update(is_active=False)
        self.message_user(request, f"{count} promotion(s) have been deactivated.")

    def save_model(self, request, obj, form, change):
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("created_by").prefetch_related("menu_items")
