from django.contrib import admin

from .models import Remittance


@admin.register(Remittance)
class RemittanceAdmin(admin.ModelAdmin):
    list_display = (
        "tracking_code",
        "state",
        "amount_sent",
        "delivery_type",
        "delivery_amount",
        "courier",
        "reseller",
        "created_at",
    )
    list_filter = ("state", "delivery_type", "invoiced")
    search_fields = ("tracking_code", "sender_name", "beneficiary_name")

    # L'état n'évolue que par les services
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
