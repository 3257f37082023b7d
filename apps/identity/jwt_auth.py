"""
JWT Authentication utilities.

Issues and verifies the bearer tokens sent in the Authorization header.
Tokens are stateless and carry the identity and role claims.
"""
import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from django.conf import settings


# JWT Configuration
JWT_SECRET = getattr(settings, 'JWT_SECRET', settings.SECRET_KEY)
JWT_ALGORITHM = 'HS256'
ACCESS_TOKEN_EXPIRE_DAYS = 7


def create_access_token(user) -> str:
    """
    Create an access token for the given user.

    Contains id, role and name for request authorization.
    Expires in 7 days.
    """
    now = datetime.now(timezone.utc)
    payload = {
        'id': str(user.id),
        'role': user.role,
        'name': user.name,
        'exp': now + timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS),
        'iat': now,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid/expired.
    """
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()
