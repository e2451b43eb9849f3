from django.urls import path
from rest_framework.routers import DefaultRouter

from resellers.views import ResellerBalanceView, ResellerPaymentViewSet

router = DefaultRouter()
router.register(r"resellers/payments", ResellerPaymentViewSet, basename="reseller-payments")

urlpatterns = router.urls + [
    path("resellers/balance/", ResellerBalanceView.as_view(), name="reseller-balance"),
]
