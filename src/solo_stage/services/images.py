"""Image uploads kept in a filesystem-backed object store."""

from __future__ import annotations

import logging
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from solo_stage.core.settings import settings

logger = logging.getLogger(__name__)

# Content type -> stored file extension.
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
EXTENSION_CONTENT_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}
_OBJECT_NAME_RE = re.compile(r"^\d{13}-[0-9a-f]{8}\.(jpg|png|gif|webp)$")


class ImageValidationError(ValueError):
    """Raised when an upload is missing, of a disallowed type, or too large."""


@dataclass(frozen=True)
class StoredImage:
    filename: str
    url: str
    content_type: str


class ImageStore:
    """Write and read uploaded images under a single directory."""

    def __init__(self, root: Path, *, public_base_url: str, max_bytes: int) -> None:
        self.root = root
        self.public_base_url = public_base_url.rstrip("/")
        self.max_bytes = max_bytes

    def validate(self, content_type: str | None, size: int) -> str:
        """Return the extension for an acceptable upload.

        Raises:
            ImageValidationError: If the type or size is not accepted.
        """
        extension = ALLOWED_IMAGE_TYPES.get((content_type or "").lower())
        if extension is None:
            raise ImageValidationError("Invalid file type. Allowed: JPEG, PNG, GIF, WebP")
        if size > self.max_bytes:
            limit_mib = self.max_bytes // (1024 * 1024)
            raise ImageValidationError(f"File size exceeds {limit_mib}MB limit")
        if size == 0:
            raise ImageValidationError("No image file provided")
        return extension

    @staticmethod
    def new_object_name(extension: str) -> str:
        return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{extension}"

    def save(self, data: bytes, content_type: str | None) -> StoredImage:
        """Validate and persist `data`, returning its public reference."""
        extension = self.validate(content_type, len(data))
        filename = self.new_object_name(extension)
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / filename).write_bytes(data)
        logger.info("Stored image %s (%d bytes)", filename, len(data))
        return StoredImage(
            filename=filename,
            url=f"{self.public_base_url}/images/{filename}",
            content_type=EXTENSION_CONTENT_TYPES[extension],
        )

    def path_for(self, filename: str) -> Path | None:
        """Return the stored file for `filename`, or None if unknown or malformed."""
        if not _OBJECT_NAME_RE.match(filename):
            return None
        path = self.root / filename
        return path if path.is_file() else None


def content_type_for(filename: str) -> str:
    return EXTENSION_CONTENT_TYPES.get(filename.rsplit(".", 1)[-1], "application/octet-stream")


def get_image_store() -> ImageStore:
    """Return the image store configured from settings."""
    return ImageStore(
        Path(settings.upload_dir),
        public_base_url=settings.site_url,
        max_bytes=settings.upload_max_bytes,
    )
