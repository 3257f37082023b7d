"""
Checklist-driven progress and status derivation.

Pure functions over the checklist's list-of-dicts form so they can be
used on a model instance or on a request payload alike.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List

from .models import TaskStatus


def count_completed(items: Iterable[dict]) -> int:
    return sum(1 for item in items or [] if item.get('completed'))


def compute_progress(items: List[dict]) -> int:
    """
    Percentage of completed items, rounded half-up; 0 for an empty checklist.
    """
    total = len(items or [])
    if total == 0:
        return 0
    ratio = Decimal(count_completed(items) * 100) / Decimal(total)
    return int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def derive_status(progress: int) -> str:
    if progress >= 100:
        return TaskStatus.COMPLETED
    if progress > 0:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.PENDING


def complete_all(items: List[dict]) -> List[dict]:
    """Copy of the checklist with every item marked completed."""
    return [{**item, 'completed': True} for item in items or []]


def apply_checklist(task, items: List[dict]) -> None:
    """
    Replace the checklist and re-derive progress and status from it.
    Overrides any status set manually before.
    """
    task.todo_checklist = list(items or [])
    task.progress = compute_progress(task.todo_checklist)
    task.status = derive_status(task.progress)
