from django.urls import include, path
from rest_framework import routers

from .views import ActivePromotionViewSet

app_name = "discounts"

router = routers.SimpleRouter()
router.register(r"promotions", ActivePromotionViewSet, basename="promotion")

urlpatterns = [
    path("", include(router.urls)),
]
