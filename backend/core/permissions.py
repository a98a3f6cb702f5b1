from rest_framework.permissions import BasePermission


class HasAdminAccess(BasePermission):
    """super_admin or admin role"""
    message = 'Admin access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'has_admin_access', False))
