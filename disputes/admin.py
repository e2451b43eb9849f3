from django.contrib import admin

from .models import Dispute, DisputeComment


class DisputeCommentInline(admin.TabularInline):
    model = DisputeComment
    extra = 0
    can_delete = False
    readonly_fields = ("kind", "author", "content", "internal", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Dispute)
class DisputeAdmin(admin.ModelAdmin):
    list_display = (
        "number",
        "remittance",
        "kind",
        "priority",
        "status",
        "assigned_to",
        "deadline",
        "created_at",
    )
    list_filter = ("status", "priority", "kind")
    search_fields = ("number", "remittance__tracking_code")
    inlines = [DisputeCommentInline]

    # Le statut n'évolue que par les services
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
