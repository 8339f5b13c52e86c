"""
Inventory — Permissions

Reading the ledger is open to authenticated users; recording a movement
requires the admin or warehouse role.

@file inventory/permissions.py
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class CanRecordInventory(BasePermission):

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.can_manage_inventory
