import uuid
from django.db import models


class Comment(models.Model):
    """
    A comment on exactly one task. The task reference never changes.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task = models.ForeignKey(
        'tasks.Task',
        on_delete=models.CASCADE,
        related_name='comments',
    )
    author = models.ForeignKey(
        'identity.User',
        on_delete=models.CASCADE,
        related_name='comments',
    )
    text = models.TextField()

    # [{"user": uuid-str, "offset": int, "length": int}, ...]
    mentions = models.JSONField(default=list, blank=True)
    # [{"file_name", "file_url", "file_type", "file_size"}, ...]
    attachments = models.JSONField(default=list, blank=True)
    is_edited = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['task', '-created_at'], name='comment_task_created_idx'),
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._loaded_task_id = self.__dict__.get('task_id')

    def __str__(self):
        return f"Comment by {self.author_id} on {self.task_id}"

    def save(self, *args, **kwargs):
        if self._loaded_task_id is not None and self.task_id != self._loaded_task_id:
            raise ValueError("A comment cannot be moved to another task.")
        self.text = (self.text or '').strip()
        super().save(*args, **kwargs)
        self._loaded_task_id = self.task_id


class CommentReaction(models.Model):
    """
    One emoji from one user on one comment. Adding the same pair again
    removes it, so the pair is unique.
    """
    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        related_name='reactions',
    )
    user = models.ForeignKey(
        'identity.User',
        on_delete=models.CASCADE,
        related_name='comment_reactions',
    )
    emoji = models.CharField(max_length=32)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['comment', 'user', 'emoji'],
                name='unique_reaction_per_user_emoji',
            ),
        ]

    def __str__(self):
        return f"{self.emoji} by {self.user_id}"
