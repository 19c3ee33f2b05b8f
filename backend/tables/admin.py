from django.contrib import admin

from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    """
    Admin for the fixed set of dining tables. Merges and status changes go
    through the floor API, so they are read-only here once a table exists.
    """

    list_display = ("number", "capacity", "status", "merged_with", "updated_at")
    list_filter = ("status",)
    search_fields = ("number",)
    ordering = ("number",)

    def get_readonly_fields(self, request, obj=None):
        if obj:
            return ("status", "merged_with", "updated_at")
        return ("merged_with", "updated_at")
