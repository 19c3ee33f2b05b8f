from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("menu_item", "quantity", "price", "get_line_item_total", "status", "bundle_instance", "notes")
    readonly_fields = fields
    can_delete = False

    @admin.display(description="Line Item Total")
    def get_line_item_total(self, obj):
        return f"${obj.total_price:,.2f}"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.

    Orders change through the POS API so that totals, table occupancy and the
    status rules stay consistent; only the customer and note fields are
    editable here.
    """

    list_display = (
        "order_number",
        "order_type",
        "status",
        "table",
        "created_by_name",
        "get_total_formatted",
        "created_at",
    )
    list_display_links = ("order_number",)
    list_filter = ("status", "order_type", "created_at")
    search_fields = ("order_number", "customer_name", "customer_phone")
    inlines = [OrderItemInline]
    date_hierarchy = "created_at"

    fieldsets = (
        (
            "Order Overview",
            {"fields": ("id", "order_number", "order_type", "status", "table", "created_by")},
        ),
        ("Customer", {"fields": ("customer_name", "customer_phone", "pickup_time", "notes")}),
        (
            "Discount",
            {
                "fields": (
                    "discount_type",
                    "discount_value",
                    "discount_reason",
                    "manual_discount_reason",
                    "bundle_savings",
                    "discount_applied_by",
                )
            },
        ),
        (
            "Financial Summary",
            {
                "fields": (
                    "subtotal",
                    "discount_amount",
                    "tax_amount",
                    "surcharges",
                    "tip_amount",
                    "get_total_formatted",
                )
            },
        ),
        ("Timestamps", {"classes": ("collapse",), "fields": ("created_at", "updated_at")}),
    )

    readonly_fields = (
        "id",
        "order_number",
        "order_type",
        "status",
        "table",
        "created_by",
        "discount_type",
        "discount_value",
        "discount_reason",
        "manual_discount_reason",
        "bundle_savings",
        "discount_applied_by",
        "subtotal",
        "discount_amount",
        "tax_amount",
        "surcharges",
        "tip_amount",
        "get_total_formatted",
        "created_at",
        "updated_at",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("table", "created_by")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(ordering="created_by__first_name", description="Taken By")
    def created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None

    @admin.display(ordering="total_amount", description="Total")
    def get_total_formatted(self, obj):
        return f"${obj.total_amount:,.2f}"
