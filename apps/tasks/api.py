"""
Tasks API endpoints.

Authorization is tenant-scoped: the service layer rejects any task whose
admin differs from the caller's resolved tenant.
"""
from typing import Optional
from uuid import UUID
from ninja import Router
from django.http import HttpRequest

from apps.identity.api import require_auth
from .models import Task
from .schemas import (
    TaskIn, TaskUpdateIn, StatusUpdateIn, ChecklistUpdateIn,
    TaskOut, TaskListOut, TaskMessageOut, StatusSummaryOut, AssigneeOut,
    ChecklistItem, AttachmentMeta,
)
from apps.identity.dtos import MessageOut
from . import services

router = Router(tags=["Tasks"])


def to_task_out(task: Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        status=task.status,
        due_date=task.due_date,
        admin_id=task.admin_id,
        created_by_id=task.created_by_id,
        assigned_to=[
            AssigneeOut(
                id=u.id,
                name=u.name,
                email=u.email,
                profile_image_url=u.profile_image_url,
            )
            for u in task.assigned_to.all()
        ],
        todo_checklist=[ChecklistItem(**item) for item in task.todo_checklist],
        progress=task.progress,
        completed_todo_count=task.completed_todo_count,
        attachments=[AttachmentMeta(**a) for a in task.attachments],
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


@router.get("", response=TaskListOut, auth=None)
def list_tasks(request: HttpRequest, status: Optional[str] = None):
    """
    List tasks in the caller's scope, sorted by due date.

    - Admins see every task of their tenant
    - Members see only tasks assigned to them
    """
    user = require_auth(request)
    tasks, summary = services.list_tasks(user, status)
    return TaskListOut(
        tasks=[to_task_out(t) for t in tasks],
        status_summary=StatusSummaryOut(**summary),
    )


@router.post("", response={201: TaskMessageOut}, auth=None)
def create_task(request: HttpRequest, payload: TaskIn):
    """Create a task in the admin's tenant."""
    user = require_auth(request)
    task = services.create_task(user, payload)
    return 201, TaskMessageOut(message="Task created successfully", task=to_task_out(task))


@router.get("/{task_id}", response=TaskOut, auth=None)
def get_task(request: HttpRequest, task_id: UUID):
    user = require_auth(request)
    return to_task_out(services.get_task(task_id, user))


@router.put("/{task_id}", response=TaskMessageOut, auth=None)
def update_task(request: HttpRequest, task_id: UUID, payload: TaskUpdateIn):
    """Patch a task. Owning admin only."""
    user = require_auth(request)
    task = services.update_task(task_id, user, payload)
    return TaskMessageOut(message="Task updated successfully", task=to_task_out(task))


@router.delete("/{task_id}", response=MessageOut, auth=None)
def delete_task(request: HttpRequest, task_id: UUID):
    user = require_auth(request)
    services.delete_task(task_id, user)
    return MessageOut(message="Task deleted successfully")


@router.patch("/{task_id}/status", response=TaskMessageOut, auth=None)
def update_task_status(request: HttpRequest, task_id: UUID, payload: StatusUpdateIn):
    """Set the status explicitly. Admin or assignee."""
    user = require_auth(request)
    task = services.update_status(task_id, user, payload.status)
    return TaskMessageOut(message="Task status updated", task=to_task_out(task))


@router.patch("/{task_id}/checklist", response=TaskMessageOut, auth=None)
def update_task_checklist(request: HttpRequest, task_id: UUID, payload: ChecklistUpdateIn):
    """Replace the checklist; progress and status are re-derived from it."""
    user = require_auth(request)
    items = [item.dict() for item in payload.todo_checklist]
    task = services.update_checklist(task_id, user, items)
    return TaskMessageOut(message="Task checklist updated", task=to_task_out(task))
