from django.urls import path
from rest_framework.routers import DefaultRouter

from remittances.views import (
    PublicQuoteView,
    PublicRequestView,
    PublicTrackView,
    RemittanceViewSet,
)

router = DefaultRouter()
router.register(r"remittances", RemittanceViewSet, basename="remittances")

urlpatterns = router.urls + [
    path("public/requests/", PublicRequestView.as_view(), name="public-request"),
    path("public/track/<str:code>/", PublicTrackView.as_view(), name="public-track"),
    path("public/quote/", PublicQuoteView.as_view(), name="public-quote"),
]
