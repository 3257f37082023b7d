"""
Tenant resolution.

A tenant is rooted at one admin. Every task and comment query is filtered
by the id returned from resolve_tenant_id(), never by the raw user id.
"""
from uuid import UUID

from apps.core.exceptions import Unauthorized
from .models import User, UserRole


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN


def resolve_tenant_id(user: User) -> UUID:
    """
    Admins are their own tenant; members resolve to their owning admin.
    """
    if is_admin(user):
        return user.id
    if not user.admin_id:
        raise Unauthorized("User has no tenant context")
    return user.admin_id


def same_tenant(user: User, tenant_id: UUID) -> bool:
    return str(resolve_tenant_id(user)) == str(tenant_id)
