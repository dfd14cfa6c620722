"""Photo storage collaborator.

The inventory core only keeps the URL and logical path returned here, never
the image bytes.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from homestock.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class PhotoStorage(Protocol):
    def upload(self, path: str, data: bytes, content_type: str | None = None) -> str:
        """Store ``data`` under ``path`` and return a publicly resolvable URL."""

    def remove(self, paths: Iterable[str]) -> None:
        """Delete stored photos; missing paths are ignored."""


class LocalPhotoStorage:
    """Stores photos on the local filesystem and serves them under ``base_url``."""

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise ValueError(f"Photo path escapes storage root: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> str:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"Stored photo {path} ({len(data)} bytes, {content_type or 'unknown type'})")
        return f"{self.base_url}/{path}"

    def remove(self, paths: Iterable[str]) -> None:
        for path in paths:
            self._resolve(path).unlink(missing_ok=True)


def get_photo_storage() -> PhotoStorage:
    return LocalPhotoStorage(settings.photo_storage_dir, settings.photo_base_url)


def photo_path(household_id: int, folder: str, owner_id: int, filename: str | None, stamp: str) -> str:
    """Logical path ``{household}/{folder}/{owner}-{stamp}.{ext}``."""
    ext = "jpg"
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
    return f"{household_id}/{folder}/{owner_id}-{stamp}.{ext}"
