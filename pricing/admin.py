from django.contrib import admin

from .models import BusinessSetting, CommissionTier


@admin.register(CommissionTier)
class CommissionTierAdmin(admin.ModelAdmin):
    list_display = ("name", "range_min", "range_max", "percentage", "fixed_fee", "active")
    list_filter = ("active",)


@admin.register(BusinessSetting)
class BusinessSettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value", "description", "updated_at")
    search_fields = ("key",)
