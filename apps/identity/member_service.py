"""
Member management for tenant admins.

Lists an admin's members with per-status task counts and removes members
without ever deleting the tasks they were assigned to.
"""
import logging
from typing import List
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q

from apps.core.exceptions import Forbidden, NotFound
from apps.tasks.models import Task, TaskStatus
from .models import User, UserRole
from .dtos import MemberOut
from .tenancy import is_admin, resolve_tenant_id

logger = logging.getLogger(__name__)


def _require_admin(user: User) -> None:
    if not is_admin(user):
        raise Forbidden("Not authorized")


def list_members(admin: User) -> List[MemberOut]:
    """Members of the admin's tenant, each with task counts inside the tenant."""
    _require_admin(admin)

    in_tenant = Q(assigned_tasks__admin_id=admin.id)
    members = (
        User.objects.filter(role=UserRole.MEMBER, admin_id=admin.id)
        .annotate(
            pending_count=Count(
                'assigned_tasks',
                filter=in_tenant & Q(assigned_tasks__status=TaskStatus.PENDING),
            ),
            in_progress_count=Count(
                'assigned_tasks',
                filter=in_tenant & Q(assigned_tasks__status=TaskStatus.IN_PROGRESS),
            ),
            completed_count=Count(
                'assigned_tasks',
                filter=in_tenant & Q(assigned_tasks__status=TaskStatus.COMPLETED),
            ),
        )
        .order_by('name')
    )

    return [
        MemberOut(
            id=m.id,
            name=m.name,
            email=m.email,
            role=m.role,
            admin_id=m.admin_id,
            profile_image_url=m.profile_image_url,
            created_at=m.created_at,
            pending_tasks=m.pending_count,
            in_progress_tasks=m.in_progress_count,
            completed_tasks=m.completed_count,
        )
        for m in members
    ]


def get_member(user_id: UUID, requester: User) -> User:
    """A user of the requester's tenant (its admin or one of its members)."""
    tenant_id = resolve_tenant_id(requester)
    try:
        return User.objects.get(Q(admin_id=tenant_id) | Q(id=tenant_id), id=user_id)
    except (User.DoesNotExist, ValidationError):
        raise NotFound("User not found")


@transaction.atomic
def remove_member(user_id: UUID, admin: User) -> int:
    """
    Unassign the member from every task of the admin's tenant, then delete
    the account. Tasks left without assignees stay in place.

    Returns the number of tasks that were updated.
    """
    _require_admin(admin)
    try:
        member = User.objects.get(id=user_id, role=UserRole.MEMBER, admin_id=admin.id)
    except (User.DoesNotExist, ValidationError):
        raise NotFound("User not found")

    tasks = Task.objects.filter(admin_id=admin.id, assigned_to=member)
    updated = 0
    for task in tasks:
        task.assigned_to.remove(member)
        updated += 1

    member.delete()
    logger.info(f"Member {user_id} removed by admin {admin.id}; {updated} tasks unassigned")
    return updated
