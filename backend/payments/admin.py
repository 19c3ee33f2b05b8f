from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Read-only view of recorded payments. A payment is only ever created by
    settling an order.
    """

    list_display = (
        "id",
        "order",
        "method",
        "total_due",
        "amount",
        "tip",
        "change_due",
        "processed_by",
        "created_at",
    )
    list_filter = ("method", "created_at")
    search_fields = ("id", "order__order_number")
    fieldsets = (
        (None, {"fields": ("id", "order", "method", "processed_by")}),
        ("Financials", {"fields": ("total_due", "amount", "tip", "change_due")}),
        ("Timestamps", {"fields": ("created_at",)}),
    )
    readonly_fields = (
        "id",
        "order",
        "method",
        "processed_by",
        "total_due",
        "amount",
        "tip",
        "change_due",
        "created_at",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("order", "processed_by")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
