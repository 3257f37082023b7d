"""
Dashboard aggregation services.
Provides task counts, status/priority distributions and recent activity
for an admin's whole tenant or for a single member.
"""
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from apps.core.exceptions import Forbidden, Unauthorized
from apps.identity.models import User
from apps.identity.tenancy import is_admin
from apps.tasks.models import Task, TaskStatus, TaskPriority
from .schemas import (
    DashboardOut, StatisticsOut, ChartsOut, TaskDistributionOut,
    PriorityLevelsOut, RecentTaskOut,
)

RECENT_TASKS_LIMIT = 10


def build_dashboard(base: QuerySet) -> DashboardOut:
    """
    Aggregate statistics, charts and recent tasks over a task queryset.
    """
    now = timezone.now()

    statistics = base.aggregate(
        total_tasks=Count('id'),
        pending_tasks=Count('id', filter=Q(status=TaskStatus.PENDING)),
        completed_tasks=Count('id', filter=Q(status=TaskStatus.COMPLETED)),
        overdue_tasks=Count(
            'id',
            filter=~Q(status=TaskStatus.COMPLETED) & Q(due_date__lt=now),
        ),
    )

    by_status = {
        row['status']: row['count']
        for row in base.order_by().values('status').annotate(count=Count('id'))
    }
    by_priority = {
        row['priority']: row['count']
        for row in base.order_by().values('priority').annotate(count=Count('id'))
    }

    recent = base.order_by('-created_at')[:RECENT_TASKS_LIMIT]

    return DashboardOut(
        statistics=StatisticsOut(**statistics),
        charts=ChartsOut(
            task_distribution=TaskDistributionOut(
                Pending=by_status.get(TaskStatus.PENDING, 0),
                InProgress=by_status.get(TaskStatus.IN_PROGRESS, 0),
                Completed=by_status.get(TaskStatus.COMPLETED, 0),
                All=statistics['total_tasks'],
            ),
            task_priority_levels=PriorityLevelsOut(
                Low=by_priority.get(TaskPriority.LOW, 0),
                Medium=by_priority.get(TaskPriority.MEDIUM, 0),
                High=by_priority.get(TaskPriority.HIGH, 0),
            ),
        ),
        recent_tasks=[
            RecentTaskOut(
                id=t.id,
                title=t.title,
                status=t.status,
                priority=t.priority,
                due_date=t.due_date,
                created_at=t.created_at,
            )
            for t in recent
        ],
    )


def get_admin_dashboard(user: User) -> DashboardOut:
    """Whole-tenant view; the caller is the tenant's admin."""
    if not is_admin(user):
        raise Forbidden("Not authorized")
    return build_dashboard(Task.objects.filter(admin_id=user.id))


def get_member_dashboard(user: User) -> DashboardOut:
    """
    Tasks of the member's tenant that are assigned to the member. Admins
    are never assignees, so theirs is an empty dashboard.
    """
    if is_admin(user):
        return build_dashboard(Task.objects.none())
    if not user.admin_id:
        raise Unauthorized("User has no tenant context")
    return build_dashboard(Task.objects.filter(admin_id=user.admin_id, assigned_to=user))
