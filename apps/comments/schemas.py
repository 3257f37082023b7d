"""
API Schemas for Comments app.
"""
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from ninja import Schema
from pydantic import Field

from apps.identity.dtos import UserBriefOut
from apps.tasks.schemas import AttachmentMeta


class MentionIn(Schema):
    user: UUID
    offset: int
    length: int


class CommentIn(Schema):
    text: str
    mentions: List[MentionIn] = Field(default_factory=list)
    attachments: List[AttachmentMeta] = Field(default_factory=list)


class CommentUpdateIn(Schema):
    text: str


class ReactionIn(Schema):
    emoji: str


class ReactionOut(Schema):
    emoji: str
    user: UserBriefOut


class MentionOut(Schema):
    user: UUID
    offset: int
    length: int


class CommentOut(Schema):
    id: UUID
    task_id: UUID
    text: str
    author: UserBriefOut
    mentions: List[MentionOut]
    reactions: List[ReactionOut]
    attachments: List[AttachmentMeta]
    is_edited: bool
    created_at: datetime
    updated_at: datetime


class DeleteCountOut(Schema):
    message: str
    deleted_count: int
