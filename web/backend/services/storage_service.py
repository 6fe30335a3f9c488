#!/usr/bin/env python3
"""
Profile picture storage on local disk.

Files live under `<upload_dir>/profile-pictures/` and are served by the
app's static mount at `<url_prefix>/profile-pictures/<name>`.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from core.config_loader import StorageConfig
from ..exceptions import ValidationException

logger = logging.getLogger(__name__)

PICTURE_FOLDER = 'profile-pictures'

ALLOWED_IMAGE_TYPES = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/gif': 'gif',
    'image/webp': 'webp',
}


class StorageService:
    """Saves and deletes profile pictures."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self.root = Path(config.upload_dir)
        self.url_prefix = config.url_prefix.rstrip('/')

    def save_profile_picture(self, user_id, content: bytes, content_type: Optional[str]) -> str:
        """
        Store an uploaded picture and return its public URL path.

        Raises:
            ValidationException: Empty file, non-image type or file too large.
        """
        if not content:
            raise ValidationException("No file uploaded")

        extension = ALLOWED_IMAGE_TYPES.get((content_type or '').lower())
        if extension is None:
            raise ValidationException("Only image files are allowed")

        if len(content) > self.config.max_upload_bytes:
            limit_mb = self.config.max_upload_bytes // (1024 * 1024)
            raise ValidationException(f"File too large (max {limit_mb}MB)")

        folder = self.root / PICTURE_FOLDER
        folder.mkdir(parents=True, exist_ok=True)

        filename = f"{user_id}-{uuid.uuid4()}.{extension}"
        (folder / filename).write_bytes(content)

        logger.info(f"Stored profile picture {filename} ({len(content)} bytes)")
        return f"{self.url_prefix}/{PICTURE_FOLDER}/{filename}"

    def delete(self, url: Optional[str]) -> bool:
        """
        Delete a previously stored picture.

        Best-effort: failures are logged and reported as False so the
        caller's record update is never blocked by storage cleanup.
        """
        path = self._path_for_url(url)
        if path is None:
            return False

        try:
            path.unlink()
            logger.info(f"Deleted profile picture {path.name}")
            return True
        except FileNotFoundError:
            logger.warning(f"Profile picture already missing: {path.name}")
            return False
        except OSError as e:
            logger.error(f"Failed to delete profile picture {path.name}: {e}")
            return False

    def _path_for_url(self, url: Optional[str]) -> Optional[Path]:
        prefix = f"{self.url_prefix}/{PICTURE_FOLDER}/"
        if not url or not url.startswith(prefix):
            return None

        filename = url[len(prefix):]
        # Reject anything that would escape the picture folder
        if not filename or '/' in filename or '\\' in filename or filename.startswith('.'):
            logger.warning(f"Refusing to delete suspicious picture path: {url}")
            return None

        return self.root / PICTURE_FOLDER / filename
