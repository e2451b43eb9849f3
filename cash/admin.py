from django.contrib import admin

from .models import CashMovement


@admin.register(CashMovement)
class CashMovementAdmin(admin.ModelAdmin):
    list_display = ("courier", "kind", "currency", "amount", "balance_after", "remittance", "created_at")
    list_filter = ("kind", "currency")
    search_fields = ("courier__username", "remittance__tracking_code")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
