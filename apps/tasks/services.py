"""
Task lifecycle services.

Every operation resolves the caller's tenant first and refuses to touch
tasks whose `admin` differs from it.
"""
import logging
from typing import Any, List, Optional, Tuple
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q, QuerySet

from apps.core.exceptions import Forbidden, InvalidInput, NotFound
from apps.identity.models import User, UserRole
from apps.identity.tenancy import is_admin, resolve_tenant_id, same_tenant
from .models import Task, TaskPriority, TaskStatus
from .progress import apply_checklist, complete_all
from .schemas import TaskIn, TaskUpdateIn

logger = logging.getLogger(__name__)

ASSIGNED_TO_ERROR = "assignedTo must be an array of user IDs"


# =============================================================================
# Scoping helpers
# =============================================================================

def tenant_tasks(user: User) -> QuerySet:
    """
    Tasks visible to the user: the whole tenant for admins, only
    assigned tasks for members.
    """
    queryset = Task.objects.filter(admin_id=resolve_tenant_id(user))
    if not is_admin(user):
        queryset = queryset.filter(assigned_to=user)
    return queryset


def _load_task(task_id: UUID) -> Task:
    try:
        return Task.objects.get(id=task_id)
    except (Task.DoesNotExist, ValidationError):
        raise NotFound("Task not found")


def _ensure_same_tenant(task: Task, user: User) -> None:
    if not same_tenant(user, task.admin_id):
        raise Forbidden("Not authorized")


def _ensure_owning_admin(task: Task, user: User) -> None:
    _ensure_same_tenant(task, user)
    if not is_admin(user):
        raise Forbidden("Only the task admin can perform this action")


def _ensure_can_progress(task: Task, user: User) -> None:
    """Status and checklist edits: the tenant admin or an assignee."""
    _ensure_same_tenant(task, user)
    if is_admin(user):
        return
    if not task.assigned_to.filter(id=user.id).exists():
        raise Forbidden("Not authorized")


# =============================================================================
# Validation
# =============================================================================

def validate_assignees(assigned_to: Any, tenant_id: UUID) -> List[User]:
    """
    assigned_to must be a list of ids of the tenant's members.
    """
    if not isinstance(assigned_to, list):
        raise InvalidInput(ASSIGNED_TO_ERROR)
    try:
        ids = {UUID(str(value)) for value in assigned_to}
    except (TypeError, ValueError, AttributeError):
        raise InvalidInput(ASSIGNED_TO_ERROR)

    users = list(
        User.objects.filter(id__in=ids, role=UserRole.MEMBER, admin_id=tenant_id)
    )
    if len(users) != len(ids):
        raise InvalidInput("Tasks can only be assigned to members of your team")
    return users


def validate_priority(priority: str) -> str:
    if priority not in TaskPriority.values:
        raise InvalidInput(f"Invalid priority: {priority}")
    return priority


def validate_status(status: str) -> str:
    if status not in TaskStatus.values:
        raise InvalidInput(f"Invalid status: {status}")
    return status


# =============================================================================
# Queries
# =============================================================================

def list_tasks(user: User, status: Optional[str] = None) -> Tuple[List[Task], dict]:
    """
    List the caller's tasks ordered by due date, plus a status summary
    computed over the same scope without the status filter.
    """
    base = tenant_tasks(user)

    queryset = base
    if status and status != 'All':
        queryset = queryset.filter(status=status)
    tasks = list(queryset.prefetch_related('assigned_to').order_by('due_date'))

    summary = base.aggregate(
        all=Count('id'),
        pending_tasks=Count('id', filter=Q(status=TaskStatus.PENDING)),
        in_progress_tasks=Count('id', filter=Q(status=TaskStatus.IN_PROGRESS)),
        completed_tasks=Count('id', filter=Q(status=TaskStatus.COMPLETED)),
    )
    return tasks, summary


def get_task(task_id: UUID, user: User) -> Task:
    task = _load_task(task_id)
    _ensure_same_tenant(task, user)
    return task


# =============================================================================
# Mutations
# =============================================================================

@transaction.atomic
def create_task(user: User, payload: TaskIn) -> Task:
    if not is_admin(user):
        raise Forbidden("Only admins can create tasks")
    tenant_id = resolve_tenant_id(user)
    assignees = validate_assignees(payload.assigned_to, tenant_id)

    task = Task(
        admin_id=tenant_id,
        created_by=user,
        title=payload.title,
        description=payload.description,
        priority=validate_priority(payload.priority),
        due_date=payload.due_date,
        attachments=[a.dict() for a in payload.attachments],
    )
    apply_checklist(task, [item.dict() for item in payload.todo_checklist])
    task.save()
    task.assigned_to.set(assignees)

    logger.info(f"Task {task.id} created in tenant {tenant_id} by {user.id}")
    return task


@transaction.atomic
def update_task(task_id: UUID, user: User, payload: TaskUpdateIn) -> Task:
    task = _load_task(task_id)
    _ensure_owning_admin(task, user)

    if payload.title:
        task.title = payload.title
    if payload.description:
        task.description = payload.description
    if payload.priority:
        task.priority = validate_priority(payload.priority)
    if payload.due_date:
        task.due_date = payload.due_date
    if payload.attachments is not None:
        task.attachments = [a.dict() for a in payload.attachments]
    if payload.todo_checklist is not None:
        apply_checklist(task, [item.dict() for item in payload.todo_checklist])

    assignees = None
    if payload.assigned_to is not None:
        assignees = validate_assignees(payload.assigned_to, task.admin_id)

    task.save()
    if assignees is not None:
        task.assigned_to.set(assignees)
    return task


def delete_task(task_id: UUID, user: User) -> None:
    task = _load_task(task_id)
    _ensure_owning_admin(task, user)
    task.delete()
    logger.info(f"Task {task_id} deleted by {user.id}")


def update_status(task_id: UUID, user: User, status: str) -> Task:
    """
    Set the status explicitly. Completing a task marks every checklist
    item done; other values leave the checklist untouched.
    """
    task = _load_task(task_id)
    _ensure_can_progress(task, user)

    task.status = validate_status(status)
    if task.status == TaskStatus.COMPLETED:
        task.todo_checklist = complete_all(task.todo_checklist)
        task.progress = 100
    task.save()
    return task


def update_checklist(task_id: UUID, user: User, items: List[dict]) -> Task:
    task = _load_task(task_id)
    _ensure_can_progress(task, user)

    apply_checklist(task, items)
    task.save()
    return task
