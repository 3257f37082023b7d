"""DTOs for Identity app."""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID
from typing import Optional

from ninja import Schema


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    name: str
    email: str
    role: str
    admin_id: Optional[UUID]
    profile_image_url: Optional[str]
    created_at: datetime


class RegisterIn(Schema):
    name: str
    email: str
    password: str
    profile_image_url: Optional[str] = None
    admin_invite_token: Optional[str] = None


class LoginIn(Schema):
    email: str
    password: str


class ProfileUpdateIn(Schema):
    name: Optional[str] = None
    email: Optional[str] = None
    profile_image_url: Optional[str] = None
    password: Optional[str] = None
    old_password: Optional[str] = None


class UserOut(Schema):
    id: UUID
    name: str
    email: str
    role: str
    admin_id: Optional[UUID] = None
    profile_image_url: Optional[str] = None
    created_at: datetime


class AuthOut(Schema):
    """Identity plus an issued access token."""
    id: UUID
    name: str
    email: str
    role: str
    admin_id: Optional[UUID] = None
    admin_invite_token: Optional[str] = None
    profile_image_url: Optional[str] = None
    token: str


class MemberOut(UserOut):
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0


class UserBriefOut(Schema):
    """Display fields used when resolving authors and reactors."""
    id: UUID
    name: str
    profile_image_url: Optional[str] = None


class ImageUploadOut(Schema):
    image_url: str


class MessageOut(Schema):
    message: str
