"""
Project image helpers: multipart validation, uploads and best-effort cleanup.
"""

import re

from ...core import storage
from ...core.logging_service import LoggingService

INVALID_TYPE_ERROR = ('Invalid image type. Allowed: '
                      'image/jpeg, image/jpg, image/png, image/webp, image/gif')
TOO_LARGE_ERROR = 'Image file is too large (max 10MB)'


class ImageValidationError(ValueError):
    """An uploaded file failed type or size validation."""


def get_image_files(files, field='image'):
    """Non-empty uploads for a repeatable multipart field"""
    return [f for f in files.getlist(field) if f is not None]


def read_validated_images(files):
    """Validate every file, then return their bytes.

    All files are checked before any is returned so a bad file later in the
    list never leaves earlier ones uploaded.

    Raises:
        ImageValidationError: on a disallowed type or an oversized file.
    """
    images = []
    for file in files:
        data = file.read()
        if not data:
            continue
        if (file.mimetype or '').lower() not in storage.ALLOWED_IMAGE_TYPES:
            raise ImageValidationError(INVALID_TYPE_ERROR)
        if len(data) > storage.MAX_IMAGE_SIZE_BYTES:
            raise ImageValidationError(TOO_LARGE_ERROR)
        images.append(data)
    return images


def upload_images(images, folder, uploaded_public_ids):
    """Upload each image into folder.

    uploaded_public_ids is appended to as uploads succeed so the caller can
    clean up after a later failure.
    """
    uploaded = []
    for data in images:
        result = storage.upload_image(data, folder=folder)
        uploaded_public_ids.append(result['public_id'])
        uploaded.append(result)
    return uploaded


def cleanup_uploads(public_ids):
    """Best-effort delete of assets uploaded by a request that then failed"""
    for public_id in public_ids:
        try:
            storage.delete_image(public_id)
        except Exception as e:
            LoggingService.warning('storage', f"Failed to clean up upload {public_id}: {e}")


def parse_thumbnail_index(raw, count):
    """Non-negative integer string clamped to [0, count - 1]; None otherwise"""
    if not isinstance(raw, str) or not re.fullmatch(r'\d+', raw) or count <= 0:
        return None
    return min(int(raw), count - 1)
