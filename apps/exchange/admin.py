from django.contrib import admin
from .models import PointsAccount, PointsEntry, SwapRequest


class PointsEntryInline(admin.TabularInline):
    model = PointsEntry
    extra = 0
    can_delete = False
    fields = ['kind', 'amount', 'listing', 'granted_by', 'note', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PointsAccount)
class PointsAccountAdmin(admin.ModelAdmin):
    """Balances are changed through the points service, never edited here."""

    list_display = ['user', 'balance', 'updated_at']
    search_fields = ['user__email', 'user__display_name']
    ordering = ['user__email']
    readonly_fields = ['id', 'user', 'balance', 'version', 'created_at', 'updated_at']
    inlines = [PointsEntryInline]

    def has_add_permission(self, request):
        return False


@admin.register(SwapRequest)
class SwapRequestAdmin(admin.ModelAdmin):
    list_display = ['listing', 'requester', 'status', 'created_at', 'resolved_at']
    list_filter = ['status', 'created_at']
    search_fields = ['listing__title', 'requester__email']
    raw_id_fields = ['listing', 'requester']
    readonly_fields = ['id', 'status', 'version', 'created_at', 'resolved_at']
    date_hierarchy = 'created_at'
