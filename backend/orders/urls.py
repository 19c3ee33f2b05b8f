from django.urls import include, path
from rest_framework import routers
from rest_framework_nested import routers as nested_routers

from .views import OrderItemViewSet, OrderViewSet

app_name = "orders"

router = routers.DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")

orders_router = nested_routers.NestedSimpleRouter(router, r"orders", lookup="order")
orders_router.register(r"items", OrderItemViewSet, basename="order-item")

urlpatterns = [
    # Nested routes first so items/ is not taken as an order action
    path("", include(orders_router.urls)),
    path("", include(router.urls)),
]
