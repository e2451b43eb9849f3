from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class StaffUserAdmin(UserAdmin):
    list_display = ("username", "role", "is_active", "balance_usd", "balance_cup", "pending_balance")
    list_filter = ("role", "is_active", "uses_logistics")
    readonly_fields = ("balance_usd", "balance_cup", "pending_balance")
    fieldsets = UserAdmin.fieldsets + (
        ("Rôle", {"fields": ("role", "phone")}),
        ("Livreur", {"fields": ("balance_usd", "balance_cup")}),
        ("Revendeur", {"fields": ("pending_balance", "commission_rate", "uses_logistics")}),
    )
