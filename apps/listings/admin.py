# ==========================================
# apps/listings/admin.py
# ==========================================

from django.contrib import admin
from .models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    """
    Read-mostly admin for listings.

    Status is not editable here. Moderation goes through the exchange
    ledger (``POST /api/exchange/listings/{id}/moderate/``) so the state
    machine is enforced.
    """

    list_display = ['title', 'owner', 'category', 'condition', 'points_value', 'status', 'created_at']
    list_filter = ['status', 'category', 'condition', 'created_at']
    search_fields = ['title', 'description', 'owner__email']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    raw_id_fields = ['owner']
    readonly_fields = ['id', 'status', 'version', 'created_at', 'updated_at']

    fieldsets = (
        ('Garment', {
            'fields': ('id', 'owner', 'title', 'description', 'category', 'garment_type', 'size', 'condition'),
        }),
        ('Media & Tags', {
            'fields': ('images', 'tags'),
        }),
        ('Exchange', {
            'fields': ('points_value', 'status', 'version'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )
