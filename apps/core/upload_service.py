"""
Upload service for profile images.
Stores files through Django's default storage, which is S3 when
USE_S3_STORAGE is enabled and the local media directory otherwise.
"""
import logging
import uuid
from typing import Optional, Tuple

from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile

from .exceptions import InvalidInput

logger = logging.getLogger(__name__)

# Allowed file types for profile images
ALLOWED_MIME_TYPES = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
}

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MB


def validate_image(file: UploadedFile) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded image.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if file.size > MAX_FILE_SIZE:
        return False, f"File too large. Maximum size is {MAX_FILE_SIZE // (1024*1024)} MB"

    if file.content_type not in ALLOWED_MIME_TYPES:
        return False, "Only .jpeg, .jpg and .png formats are allowed"

    return True, None


def store_profile_image(file: UploadedFile, build_absolute_uri=None) -> str:
    """
    Save a profile image and return its public URL.

    Raises:
        InvalidInput: If file validation fails
    """
    is_valid, error = validate_image(file)
    if not is_valid:
        raise InvalidInput(error)

    extension = ALLOWED_MIME_TYPES[file.content_type]
    path = default_storage.save(f"profile-images/{uuid.uuid4().hex}{extension}", file)
    url = default_storage.url(path)

    # Local storage returns a relative URL
    if build_absolute_uri and url.startswith('/'):
        url = build_absolute_uri(url)

    logger.info(f"Stored profile image at {path}")
    return url
