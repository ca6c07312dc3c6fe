"""
Avatar image storage.

Each user has exactly one avatar file at "<user_id>/avatar.<ext>". Any file
already in the user's folder is removed before the new one is uploaded, so a
change of extension never leaves an orphan behind.
"""

import logging
from typing import Optional

from apicius.errors import AvatarError
from apicius.models import ImageUpload
from apicius.providers.base import ObjectStorage

logger = logging.getLogger(__name__)

MAX_AVATAR_BYTES = 2 * 1024 * 1024  # 2MB
AVATAR_CACHE_SECONDS = "3600"


def validate_avatar(upload: ImageUpload) -> None:
    """
    Check a picked avatar image.

    Raises:
        AvatarError: If the file is not an image or is larger than 2MB.
    """
    if not upload.content_type.lower().startswith("image/"):
        raise AvatarError("Please upload an image file")
    if upload.size > MAX_AVATAR_BYTES:
        raise AvatarError("Image must be less than 2MB")


def avatar_path(user_id: str, upload: ImageUpload) -> str:
    extension = upload.extension or upload.content_type.split("/", 1)[-1]
    return f"{user_id}/avatar.{extension}"


class AvatarStore:
    """Upload avatars to object storage, one file per user."""

    def __init__(self, storage: ObjectStorage):
        self.storage = storage

    def upload(self, user_id: Optional[str], upload: ImageUpload) -> str:
        """
        Replace the user's avatar.

        Args:
            user_id: Owner of the avatar
            upload: Validated image

        Returns:
            Public URL of the uploaded file.

        Raises:
            AvatarError: If there is no user, or the storage provider fails.
        """
        if not user_id:
            raise AvatarError("User ID is required")
        validate_avatar(upload)

        path = avatar_path(user_id, upload)
        try:
            existing = self.storage.list(user_id)
            if existing:
                self.storage.remove([f"{user_id}/{name}" for name in existing])
            self.storage.upload(
                path,
                upload.data,
                content_type=upload.content_type,
                upsert=True,
                cache_control=AVATAR_CACHE_SECONDS,
            )
            url = self.storage.get_public_url(path)
        except Exception as e:
            logger.warning("Failed to upload avatar for user %s: %s", user_id, e)
            raise AvatarError("Failed to upload avatar") from e

        if not url:
            raise AvatarError("Failed to upload avatar")
        logger.info("Uploaded avatar for user %s", user_id)
        return url
