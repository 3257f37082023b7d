"""Services for Identity app: registration, login and profile management."""
import logging
from typing import Optional

from django.contrib.auth import authenticate
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.exceptions import Conflict, InvalidInput, NotFound, Unauthorized
from .models import User, UserRole
from .dtos import UserDTO, AuthOut, RegisterIn, LoginIn, ProfileUpdateIn
from .jwt_auth import create_access_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        admin_id=user.admin_id,
        profile_image_url=user.profile_image_url,
        created_at=user.created_at,
    )


def get_user_dto(user_id) -> UserDTO | None:
    try:
        return to_user_dto(User.objects.get(id=user_id))
    except User.DoesNotExist:
        return None


def build_auth_response(user: User) -> AuthOut:
    """Identity, tenant linkage and a fresh token. The invite token is shown to admins only."""
    return AuthOut(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        admin_id=user.admin_id,
        admin_invite_token=user.admin_invite_token if user.role == UserRole.ADMIN else None,
        profile_image_url=user.profile_image_url,
        token=create_access_token(user),
    )


def email_taken(email: str, exclude_id=None) -> bool:
    queryset = User.objects.filter(email__iexact=email)
    if exclude_id:
        queryset = queryset.exclude(id=exclude_id)
    return queryset.exists()


@transaction.atomic
def register(payload: RegisterIn) -> AuthOut:
    """
    Register a new account.

    Without an invite token the caller becomes an admin rooting a new
    tenant. With one, the caller joins the owning admin's tenant as a member.
    """
    email = normalize_email(payload.email)
    if not email or not payload.password or not payload.name:
        raise InvalidInput("Name, email and password are required")
    if email_taken(email):
        raise Conflict("User already exists")

    admin = None
    role = UserRole.ADMIN
    if payload.admin_invite_token:
        admin = User.objects.filter(
            role=UserRole.ADMIN,
            admin_invite_token=payload.admin_invite_token,
        ).first()
        if admin is None:
            raise InvalidInput("Invalid invite token")
        role = UserRole.MEMBER

    user = User.objects.create_user(
        username=email,
        email=email,
        password=payload.password,
        name=payload.name,
        role=role,
        admin=admin,
        profile_image_url=payload.profile_image_url or None,
    )

    if admin:
        logger.info(f"Registered member {user.id} under admin {admin.id}")
    else:
        logger.info(f"Registered admin {user.id}")

    return build_auth_response(user)


def login(payload: LoginIn) -> AuthOut:
    """
    Authenticate by email and password.

    Unknown email and wrong password fail with the same message so the
    endpoint cannot be used to enumerate accounts.
    """
    user = authenticate(username=normalize_email(payload.email), password=payload.password)
    if user is None:
        logger.warning("Failed login attempt")
        raise Unauthorized(INVALID_CREDENTIALS)
    return build_auth_response(user)


def get_profile(user_id) -> UserDTO:
    dto = get_user_dto(user_id)
    if dto is None:
        raise NotFound("User not found")
    return dto


def update_profile(user_id, payload: ProfileUpdateIn) -> AuthOut:
    """
    Patch name, email and image; empty values keep what is stored.
    A password change must be confirmed with the old password.
    """
    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise NotFound("User not found")

    if payload.name:
        user.name = payload.name
    if payload.email:
        email = normalize_email(payload.email)
        if email != user.email:
            if email_taken(email, exclude_id=user.id):
                raise Conflict("Email is already in use")
            user.email = email
            user.username = email
    if payload.profile_image_url:
        user.profile_image_url = payload.profile_image_url

    if payload.password:
        if not payload.old_password:
            raise InvalidInput("Old password is required to change password")
        if not user.check_password(payload.old_password):
            raise Unauthorized("Old password is incorrect")
        user.set_password(payload.password)

    user.save()
    return build_auth_response(user)


def get_active_user(user_id) -> Optional[User]:
    try:
        return User.objects.get(id=user_id, is_active=True)
    except (User.DoesNotExist, ValidationError, ValueError):
        return None
