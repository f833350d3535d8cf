# -*- coding: utf-8 -*-
"""
Phân quyền theo role (Django auth Group): admin / member / employee.
Superuser luôn được coi là admin.
"""
from __future__ import annotations
from typing import Set

from rest_framework import permissions

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
ROLE_EMPLOYEE = "employee"


def user_roles(user) -> Set[str]:
    if not user or not user.is_authenticated:
        return set()
    roles = set(user.groups.values_list("name", flat=True))
    if user.is_superuser:
        roles.add(ROLE_ADMIN)
    return roles


class HasRole(permissions.BasePermission):
    allowed_roles: tuple = ()
    message = "Access denied."

    def has_permission(self, request, view):
        roles = user_roles(request.user)
        if roles & set(self.allowed_roles):
            return True
        self.message = f"Access denied. Required role: {' or '.join(self.allowed_roles)}"
        return False


class IsAdminRole(HasRole):
    allowed_roles = (ROLE_ADMIN,)


class IsMemberOrAdmin(HasRole):
    allowed_roles = (ROLE_MEMBER, ROLE_ADMIN)


class ReadOnlyOrAdmin(permissions.BasePermission):
    """GET cho mọi user đã đăng nhập; ghi chỉ admin."""

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return ROLE_ADMIN in user_roles(request.user)


class ReadOnlyOrMember(permissions.BasePermission):
    """GET cho mọi user đã đăng nhập; ghi cho member/admin."""

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(user_roles(request.user) & {ROLE_MEMBER, ROLE_ADMIN})
