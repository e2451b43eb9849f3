from django.contrib import admin

from .models import ResellerPayment


@admin.register(ResellerPayment)
class ResellerPaymentAdmin(admin.ModelAdmin):
    list_display = ("reseller", "amount", "method", "reference", "recorded_by", "created_at")
    list_filter = ("method",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
