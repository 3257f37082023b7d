import secrets
import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser


class UserRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'


def generate_invite_token() -> str:
    """24 hex characters, shared by an admin with prospective members."""
    return secrets.token_hex(12)


class User(AbstractUser):
    """
    Custom User model carrying the tenant linkage.

    An admin roots a tenant and owns an invite token; a member belongs to
    exactly one admin through `admin`. The email doubles as the username.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.MEMBER
    )
    profile_image_url = models.URLField(max_length=500, blank=True, null=True)

    # Only admins carry a token; only members carry an owning admin
    admin_invite_token = models.CharField(
        max_length=64, unique=True, null=True, blank=True, db_index=True
    )
    admin = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='members',
        limit_choices_to={'role': UserRole.ADMIN},
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Deferred loads must not trigger a query here
        self._loaded_admin_id = self.__dict__.get('admin_id')

    def __str__(self):
        return self.email or self.username

    def save(self, *args, **kwargs):
        if self._loaded_admin_id is not None and self.admin_id != self._loaded_admin_id:
            raise ValueError("A member's admin cannot be changed once assigned.")
        if self.role == UserRole.ADMIN and not self.admin_invite_token:
            self.admin_invite_token = generate_invite_token()
        if not self.username:
            self.username = self.email
        super().save(*args, **kwargs)
        self._loaded_admin_id = self.admin_id
