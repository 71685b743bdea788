"""
Custom permission classes for billing endpoints.

Staff permissions come from the user's role (see accounts.Permission).
"""
from rest_framework.permissions import BasePermission

from apps.accounts.models import Permission


class HasRolePermission(BasePermission):
    """
    Allow access if the user's role grants any of ``required_permissions``.

    Usage:
        class CanTakePayment(HasRolePermission):
            required_permissions = [Permission.TAKE_PAYMENT]
    """

    required_permissions = []

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return any(user.has_role_permission(p) for p in self.required_permissions)


class CanTakePayment(HasRolePermission):
    """Permission to record customer payments."""

    message = 'You do not have permission to take payments.'
    required_permissions = [Permission.TAKE_PAYMENT]


class CanViewBilling(HasRolePermission):
    """Permission to view a customer's combined billing."""

    message = 'You do not have permission to view billing.'
    required_permissions = [Permission.MANAGE_BILLING, Permission.TAKE_PAYMENT]
