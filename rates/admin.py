from django.contrib import admin

from .models import ExchangeRate, ExchangeRateHistory


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ("base_currency", "quote_currency", "rate", "source", "active", "updated_at")
    list_filter = ("source", "active", "base_currency")
    readonly_fields = ("rate",)


@admin.register(ExchangeRateHistory)
class ExchangeRateHistoryAdmin(admin.ModelAdmin):
    list_display = ("base_currency", "quote_currency", "previous_rate", "new_rate", "changed_by", "changed_at")
    list_filter = ("base_currency", "source")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
