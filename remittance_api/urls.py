# remittance_api/urls.py
from django.contrib import admin
from django.urls import path, include
from rest_framework import routers
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from core.views import RoleTokenObtainPairView
from pricing.views import BusinessSettingViewSet, CommissionTierViewSet
from rates.views import ExchangeRateViewSet

router = routers.DefaultRouter()
router.register(r'rates', ExchangeRateViewSet, basename='rates')
router.register(r'commission-tiers', CommissionTierViewSet, basename='commission-tiers')
router.register(r'business-settings', BusinessSettingViewSet, basename='business-settings')


urlpatterns = [
    path("api/v1/", include("accounts.urls")),
    path("api/v1/", include("remittances.urls")),
    path("api/v1/", include("cash.urls")),
    path("api/v1/", include("resellers.urls")),
    path("api/v1/", include("accounting.urls")),
    path("api/v1/", include("disputes.urls")),

    path("api/v1/", include(router.urls)),

    path("api/v1/auth/login/", RoleTokenObtainPairView.as_view()),
    path("api/v1/auth/refresh/", TokenRefreshView.as_view()),

    path('api/schema/', SpectacularAPIView.as_view(), name='openapi-schema'),

    path(
        'api/docs/',
        SpectacularSwaggerView.as_view(url='/api/schema/'),
        name='swagger-ui'
    ),

    path("admin/", admin.site.urls),
]
