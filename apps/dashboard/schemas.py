"""
API Schemas for Dashboard app.
"""
from typing import List
from uuid import UUID
from datetime import datetime
from ninja import Schema
from pydantic import Field


class StatisticsOut(Schema):
    total_tasks: int
    pending_tasks: int
    completed_tasks: int
    overdue_tasks: int


class TaskDistributionOut(Schema):
    Pending: int
    InProgress: int
    Completed: int
    All: int


class PriorityLevelsOut(Schema):
    Low: int
    Medium: int
    High: int


class ChartsOut(Schema):
    task_distribution: TaskDistributionOut
    task_priority_levels: PriorityLevelsOut


class RecentTaskOut(Schema):
    id: UUID
    title: str
    status: str
    priority: str
    due_date: datetime
    created_at: datetime


class DashboardOut(Schema):
    statistics: StatisticsOut
    charts: ChartsOut
    recent_tasks: List[RecentTaskOut] = Field(default_factory=list)
