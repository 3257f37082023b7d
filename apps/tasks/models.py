import uuid
from django.db import models


class TaskPriority(models.TextChoices):
    LOW = 'Low', 'Low'
    MEDIUM = 'Medium', 'Medium'
    HIGH = 'High', 'High'


class TaskStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    IN_PROGRESS = 'In Progress', 'In Progress'
    COMPLETED = 'Completed', 'Completed'


class Task(models.Model):
    """
    A unit of work inside one tenant.

    `admin` is always the tenant's admin, never a member. Checklist items
    and attachments are stored as ordered JSON lists.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    admin = models.ForeignKey(
        'identity.User',
        on_delete=models.CASCADE,
        related_name='tenant_tasks',
    )
    created_by = models.ForeignKey(
        'identity.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_tasks',
    )
    assigned_to = models.ManyToManyField(
        'identity.User',
        blank=True,
        related_name='assigned_tasks',
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    priority = models.CharField(
        max_length=10,
        choices=TaskPriority.choices,
        default=TaskPriority.MEDIUM
    )
    status = models.CharField(
        max_length=20,
        choices=TaskStatus.choices,
        default=TaskStatus.PENDING
    )
    due_date = models.DateTimeField()

    # [{"text": str, "completed": bool}, ...]
    todo_checklist = models.JSONField(default=list, blank=True)
    progress = models.PositiveSmallIntegerField(default=0)
    # [{"file_name", "file_url", "file_type", "file_size"}, ...]
    attachments = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['due_date']
        indexes = [
            models.Index(fields=['admin', 'status'], name='task_admin_status_idx'),
            models.Index(fields=['admin', '-created_at'], name='task_admin_created_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def completed_todo_count(self) -> int:
        from .progress import count_completed
        return count_completed(self.todo_checklist)
