"""
Comments API endpoints, nested under /api/tasks/{task_id}/comments.
"""
from typing import List
from uuid import UUID
from ninja import Router
from django.http import HttpRequest

from apps.identity.api import require_auth
from apps.identity.dtos import UserBriefOut, MessageOut
from apps.tasks.schemas import AttachmentMeta
from .models import Comment
from .schemas import (
    CommentIn, CommentUpdateIn, ReactionIn,
    CommentOut, ReactionOut, MentionOut, DeleteCountOut,
)
from . import services

router = Router(tags=["Comments"])


def _brief(user) -> UserBriefOut:
    return UserBriefOut(id=user.id, name=user.name, profile_image_url=user.profile_image_url)


def to_comment_out(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        task_id=comment.task_id,
        text=comment.text,
        author=_brief(comment.author),
        mentions=[MentionOut(**m) for m in comment.mentions],
        reactions=[
            ReactionOut(emoji=r.emoji, user=_brief(r.user))
            for r in comment.reactions.all()
        ],
        attachments=[AttachmentMeta(**a) for a in comment.attachments],
        is_edited=comment.is_edited,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


@router.get("/{task_id}/comments", response=List[CommentOut], auth=None)
def list_comments(request: HttpRequest, task_id: UUID):
    """All comments of a task, newest first."""
    user = require_auth(request)
    return [to_comment_out(c) for c in services.list_comments(task_id, user)]


@router.post("/{task_id}/comments", response={201: CommentOut}, auth=None)
def add_comment(request: HttpRequest, task_id: UUID, payload: CommentIn):
    user = require_auth(request)
    comment = services.add_comment(
        task_id,
        user,
        payload.text,
        mentions=[m.dict() for m in payload.mentions],
        attachments=[a.dict() for a in payload.attachments],
    )
    return 201, to_comment_out(comment)


@router.delete("/{task_id}/comments", response=DeleteCountOut, auth=None)
def delete_all_comments(request: HttpRequest, task_id: UUID):
    """Remove every comment of the task. Owning admin only."""
    user = require_auth(request)
    deleted = services.delete_all_comments(task_id, user)
    return DeleteCountOut(
        message=f"Deleted {deleted} comments successfully",
        deleted_count=deleted,
    )


@router.put("/{task_id}/comments/{comment_id}", response=CommentOut, auth=None)
def edit_comment(request: HttpRequest, task_id: UUID, comment_id: UUID, payload: CommentUpdateIn):
    """Edit own comment; marks it as edited."""
    user = require_auth(request)
    return to_comment_out(services.edit_comment(task_id, comment_id, user, payload.text))


@router.delete("/{task_id}/comments/{comment_id}", response=MessageOut, auth=None)
def delete_comment(request: HttpRequest, task_id: UUID, comment_id: UUID):
    user = require_auth(request)
    services.delete_comment(task_id, comment_id, user)
    return MessageOut(message="Comment deleted successfully")


@router.post("/{task_id}/comments/{comment_id}/reactions", response=CommentOut, auth=None)
def toggle_reaction(request: HttpRequest, task_id: UUID, comment_id: UUID, payload: ReactionIn):
    """Add the emoji reaction, or remove it if the caller already reacted with it."""
    user = require_auth(request)
    return to_comment_out(services.toggle_reaction(task_id, comment_id, user, payload.emoji))
