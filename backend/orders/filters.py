import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Filters for the order list. ``open=true`` keeps orders that are neither
    PAID nor CANCELLED.
    """

    status = django_filters.MultipleChoiceFilter(choices=Order.OrderStatus.choices)
    order_type = django_filters.ChoiceFilter(choices=Order.OrderType.choices)
    open = django_filters.BooleanFilter(method="filter_open")
    created_at__gte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_at__lte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "order_type", "table"]

    def filter_open(self, queryset, name, value):
        if value:
            return queryset.exclude(status__in=Order.TERMINAL_STATUSES)
        return queryset.filter(status__in=Order.TERMINAL_STATUSES)
