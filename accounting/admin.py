from django.contrib import admin

from .models import AccountingMovement


@admin.register(AccountingMovement)
class AccountingMovementAdmin(admin.ModelAdmin):
    list_display = ("kind", "concept", "amount", "remittance", "recorded_by", "created_at")
    list_filter = ("kind",)
    search_fields = ("concept",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
