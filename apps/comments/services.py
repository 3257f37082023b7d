"""
Comment and reaction services.

Comments are scoped to the task's tenant: only users of the tenant that
owns the task may read or write its comments.
"""
import logging
from typing import List, Optional
from uuid import UUID

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch, Q

from apps.core.exceptions import Forbidden, InvalidInput, NotFound
from apps.identity.models import User
from apps.identity.tenancy import same_tenant
from apps.tasks.models import Task
from .models import Comment, CommentReaction

logger = logging.getLogger(__name__)


def _load_task_in_tenant(task_id: UUID, user: User) -> Task:
    try:
        task = Task.objects.get(id=task_id)
    except (Task.DoesNotExist, ValidationError):
        raise NotFound("Task not found")
    if not same_tenant(user, task.admin_id):
        raise Forbidden("Not authorized")
    return task


def _load_comment(task_id: UUID, comment_id: UUID, user: User) -> Comment:
    """Comment that belongs to task_id, within the user's tenant."""
    try:
        comment = Comment.objects.select_related('task').get(id=comment_id)
    except (Comment.DoesNotExist, ValidationError):
        raise NotFound("Comment not found")
    if str(comment.task_id) != str(task_id):
        raise InvalidInput("Comment does not belong to this task")
    if not same_tenant(user, comment.task.admin_id):
        raise Forbidden("Not authorized")
    return comment


def _with_relations(queryset):
    reactions = CommentReaction.objects.select_related('user').order_by('created_at', 'id')
    return queryset.select_related('author').prefetch_related(
        Prefetch('reactions', queryset=reactions)
    )


def _refetch(comment_id) -> Comment:
    return _with_relations(Comment.objects.filter(id=comment_id)).get()


def _clean_text(text: Optional[str]) -> str:
    text = (text or '').strip()
    if not text:
        raise InvalidInput("Comment text is required")
    return text


def _clean_mentions(mentions: List[dict], tenant_id: UUID) -> List[dict]:
    if not mentions:
        return []
    user_ids = {str(m['user']) for m in mentions}
    known = User.objects.filter(Q(admin_id=tenant_id) | Q(id=tenant_id), id__in=user_ids).count()
    if known != len(user_ids):
        raise InvalidInput("Mentioned users must belong to your team")
    return [
        {'user': str(m['user']), 'offset': m['offset'], 'length': m['length']}
        for m in mentions
    ]


# =============================================================================
# Comments
# =============================================================================

def list_comments(task_id: UUID, user: User) -> List[Comment]:
    """Newest first, with author and reacting users resolved."""
    task = _load_task_in_tenant(task_id, user)
    return list(_with_relations(task.comments.all()).order_by('-created_at'))


def add_comment(
    task_id: UUID,
    user: User,
    text: str,
    mentions: Optional[List[dict]] = None,
    attachments: Optional[List[dict]] = None,
) -> Comment:
    task = _load_task_in_tenant(task_id, user)
    comment = Comment.objects.create(
        task=task,
        author=user,
        text=_clean_text(text),
        mentions=_clean_mentions(mentions or [], task.admin_id),
        attachments=attachments or [],
    )
    return _refetch(comment.id)


def edit_comment(task_id: UUID, comment_id: UUID, user: User, text: str) -> Comment:
    comment = _load_comment(task_id, comment_id, user)
    if comment.author_id != user.id:
        raise Forbidden("Not authorized to edit this comment")

    comment.text = _clean_text(text)
    comment.is_edited = True
    comment.save()
    return _refetch(comment.id)


def delete_comment(task_id: UUID, comment_id: UUID, user: User) -> None:
    comment = _load_comment(task_id, comment_id, user)
    if comment.author_id != user.id:
        raise Forbidden("Not authorized to delete this comment")
    comment.delete()


def delete_all_comments(task_id: UUID, user: User) -> int:
    """Bulk delete for the task's owning admin. Returns the number removed."""
    try:
        task = Task.objects.get(id=task_id)
    except (Task.DoesNotExist, ValidationError):
        raise NotFound("Task not found")
    if task.admin_id != user.id:
        raise Forbidden("Only the task admin can delete all comments")

    deleted_count = task.comments.count()
    task.comments.all().delete()
    logger.info(f"Deleted {deleted_count} comments from task {task_id} by {user.id}")
    return deleted_count


# =============================================================================
# Reactions
# =============================================================================

@transaction.atomic
def toggle_reaction(task_id: UUID, comment_id: UUID, user: User, emoji: str) -> Comment:
    """
    Remove the user's reaction with this emoji if present, add it otherwise.
    Applying the same toggle twice restores the original reactions.
    """
    emoji = (emoji or '').strip()
    if not emoji:
        raise InvalidInput("Emoji is required")

    comment = _load_comment(task_id, comment_id, user)
    removed, _ = CommentReaction.objects.filter(
        comment=comment, user=user, emoji=emoji
    ).delete()
    if not removed:
        CommentReaction.objects.create(comment=comment, user=user, emoji=emoji)
    return _refetch(comment.id)
