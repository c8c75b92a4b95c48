from rest_framework import permissions


class IsModerator(permissions.BasePermission):
    """
    Permission: User must hold the stored admin role.
    """

    message = 'Only admins can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_moderator)
