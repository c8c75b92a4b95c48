# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, UserRole


def _badge(label, background, color='white'):
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        background, color, label,
    )


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for ReWear users.

    Roles are stored on the user row. Promoting a member to admin here is
    the only way to grant moderation rights.
    """

    list_display = [
        'email',
        'display_name',
        'role_badge',
        'is_active_badge',
        'is_guest',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_guest',
        'is_active',
        'is_staff',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Marketplace', {
            'fields': ('role', 'is_guest'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def role_badge(self, obj):
        """Display role as colored badge."""
        if obj.role == UserRole.ADMIN:
            return _badge('Admin', '#2C7A7B')
        return _badge('Member', '#ccc', '#666')
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    def is_active_badge(self, obj):
        """Display active status as colored badge."""
        if obj.is_active:
            return _badge('Active', '#6B8E5E')
        return _badge('Inactive', '#B85C5C')
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    actions = [
        'promote_to_admin',
        'demote_to_member',
        'activate_users',
        'deactivate_users',
    ]

    @admin.action(description='Grant admin (moderator) role')
    def promote_to_admin(self, request, queryset):
        count = queryset.filter(is_guest=False).update(role=UserRole.ADMIN)
        self.message_user(request, f'Promoted {count} user(s) to admin.')

    @admin.action(description='Revoke admin role')
    def demote_to_member(self, request, queryset):
        count = queryset.filter(is_superuser=False).update(role=UserRole.MEMBER)
        self.message_user(request, f'Demoted {count} user(s) to member.')

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers for safety)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s) for safety.'
        self.message_user(request, msg)
