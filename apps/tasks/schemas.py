"""
API Schemas for Tasks app.
Ninja schemas for request/response validation.
"""
from typing import Any, List, Optional
from uuid import UUID
from datetime import datetime
from ninja import Schema
from pydantic import Field

from apps.identity.dtos import UserBriefOut


# =============================================================================
# Shared
# =============================================================================

class ChecklistItem(Schema):
    text: str
    completed: bool = False


class AttachmentMeta(Schema):
    file_name: str
    file_url: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None


# =============================================================================
# Request Schemas
# =============================================================================

class TaskIn(Schema):
    """
    Schema for creating a task.

    assigned_to is typed loosely so a non-list body reaches the service
    and is reported with the domain message instead of a schema error.
    """
    title: str
    description: str = ""
    priority: str = "Medium"
    due_date: datetime
    assigned_to: Any = Field(default_factory=list)
    todo_checklist: List[ChecklistItem] = Field(default_factory=list)
    attachments: List[AttachmentMeta] = Field(default_factory=list)


class TaskUpdateIn(Schema):
    """Schema for patching a task. Omitted fields keep their stored value."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    assigned_to: Any = None
    todo_checklist: Optional[List[ChecklistItem]] = None
    attachments: Optional[List[AttachmentMeta]] = None


class StatusUpdateIn(Schema):
    status: str


class ChecklistUpdateIn(Schema):
    todo_checklist: List[ChecklistItem]


# =============================================================================
# Response Schemas
# =============================================================================

class AssigneeOut(UserBriefOut):
    email: str


class TaskOut(Schema):
    id: UUID
    title: str
    description: str
    priority: str
    status: str
    due_date: datetime
    admin_id: UUID
    created_by_id: Optional[UUID] = None
    assigned_to: List[AssigneeOut]
    todo_checklist: List[ChecklistItem]
    progress: int
    completed_todo_count: int
    attachments: List[AttachmentMeta]
    created_at: datetime
    updated_at: datetime


class StatusSummaryOut(Schema):
    all: int
    pending_tasks: int
    in_progress_tasks: int
    completed_tasks: int


class TaskListOut(Schema):
    tasks: List[TaskOut]
    status_summary: StatusSummaryOut


class TaskMessageOut(Schema):
    message: str
    task: TaskOut
