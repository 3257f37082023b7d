"""
Identity API endpoints with JWT authentication.

Provides registration, login, profile management and the admin's member
list. Tokens travel in the `Authorization: Bearer <token>` header.
"""
from typing import List, Optional
from uuid import UUID
from ninja import Router, File
from ninja.files import UploadedFile
from django.http import HttpRequest

from apps.core.exceptions import Unauthorized
from apps.core.upload_service import store_profile_image
from .models import User
from .dtos import (
    RegisterIn, LoginIn, ProfileUpdateIn,
    AuthOut, UserOut, MemberOut, ImageUploadOut, MessageOut,
)
from .jwt_auth import decode_token, get_bearer_token
from . import services
from . import member_service

router = Router(tags=["Auth"])
users_router = Router(tags=["Users"])


# =============================================================================
# Helper Functions
# =============================================================================

def get_current_user(request: HttpRequest) -> Optional[User]:
    """
    Extract and validate user from the bearer token.

    Returns User object if valid token, None otherwise.
    """
    token = get_bearer_token(request.headers.get('Authorization'))
    if not token:
        return None

    payload = decode_token(token)
    if not payload or 'id' not in payload:
        return None

    return services.get_active_user(payload['id'])


def require_auth(request: HttpRequest) -> User:
    """
    Require authentication. Raises 401 if not authenticated.
    """
    if not get_bearer_token(request.headers.get('Authorization')):
        raise Unauthorized("Not authorized, no token")
    user = get_current_user(request)
    if not user:
        raise Unauthorized("Not authorized, token failed")
    return user


# =============================================================================
# Auth Endpoints
# =============================================================================

@router.post("/register", response={201: AuthOut}, auth=None)
def register_user(request: HttpRequest, payload: RegisterIn):
    """
    Register a new account.

    - Without `admin_invite_token`: creates an admin and returns its invite token
    - With a valid token: creates a member of that admin's team
    """
    return 201, services.register(payload)


@router.post("/login", response=AuthOut, auth=None)
def login_user(request: HttpRequest, payload: LoginIn):
    """
    Authenticate by email and password and issue an access token.
    """
    return services.login(payload)


@router.get("/profile", response=UserOut, auth=None)
def get_profile(request: HttpRequest):
    """
    Get current authenticated user's profile.
    """
    user = require_auth(request)
    return services.get_profile(user.id)


@router.put("/profile", response=AuthOut, auth=None)
def update_profile(request: HttpRequest, payload: ProfileUpdateIn):
    """
    Update name, email, image or password (old password required).
    """
    user = require_auth(request)
    return services.update_profile(user.id, payload)


@router.post("/upload-image", response=ImageUploadOut, auth=None)
def upload_image(request: HttpRequest, image: UploadedFile = File(...)):
    """
    Upload a profile image (JPEG/PNG) and return its URL.
    """
    require_auth(request)
    return ImageUploadOut(image_url=store_profile_image(image, request.build_absolute_uri))


# =============================================================================
# User Management Endpoints
# =============================================================================

@users_router.get("", response=List[MemberOut], auth=None)
def list_team_members(request: HttpRequest):
    """
    List the admin's members with their task counts.
    """
    user = require_auth(request)
    return member_service.list_members(user)


@users_router.get("/{user_id}", response=UserOut, auth=None)
def get_team_member(request: HttpRequest, user_id: UUID):
    user = require_auth(request)
    return services.to_user_dto(member_service.get_member(user_id, user))


@users_router.delete("/{user_id}", response=MessageOut, auth=None)
def remove_team_member(request: HttpRequest, user_id: UUID):
    """
    Remove a member. Their tasks stay in place, unassigned from them.
    """
    user = require_auth(request)
    member_service.remove_member(user_id, user)
    return MessageOut(
        message="User removed and tasks updated. Tasks without members remain unassigned."
    )
