from rest_framework.routers import DefaultRouter

from accounting.views import AccountingMovementViewSet

router = DefaultRouter()
router.register(r"accounting/movements", AccountingMovementViewSet, basename="accounting-movements")

urlpatterns = router.urls
