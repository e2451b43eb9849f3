from django.urls import path
from rest_framework.routers import DefaultRouter

from cash.views import CashBalanceView, CashMovementViewSet

router = DefaultRouter()
router.register(r"cash/movements", CashMovementViewSet, basename="cash-movements")

urlpatterns = router.urls + [
    path("cash/balance/", CashBalanceView.as_view(), name="cash-balance"),
]
