"""
Storage for uploaded item photos.

Files are written under the public directory so the static mount can
serve them. Stored names are random; the client filename only
contributes its extension, and only when it is a known image type.
"""

import logging
import os
import secrets
from dataclasses import dataclass
from typing import Iterable, List, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from common.utils.exceptions import StorageException

logger = logging.getLogger(__name__)

# Only these extensions are kept; anything else is stored without one
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


@dataclass
class StoredFile:
    filename: str
    image_path: str  # relative to the public directory, "/" separated
    original_name: Optional[str]
    size: int


class UploadStorage:
    """
    Writes uploaded files to disk and reports where they landed.
    """

    def __init__(self, public_dir: str, upload_subdir: str = "uploads"):
        """
        Initialize UploadStorage.

        Args:
            public_dir: Directory served under the public URL prefix
            upload_subdir: Subdirectory of public_dir for uploads
        """
        self._public_dir = public_dir
        self._upload_subdir = upload_subdir.strip("/")
        self._upload_dir = os.path.join(public_dir, self._upload_subdir)

    @property
    def upload_dir(self) -> str:
        return self._upload_dir

    def ensure_directories(self) -> None:
        os.makedirs(self._upload_dir, exist_ok=True)

    async def save(self, upload: UploadFile) -> StoredFile:
        """
        Persist one uploaded file.

        Raises:
            StorageException: The file could not be written
        """
        data = await upload.read()
        filename = secrets.token_hex(16) + self._safe_extension(upload.filename)
        destination = os.path.join(self._upload_dir, filename)

        try:
            await run_in_threadpool(self._write, destination, data)
        except OSError as e:
            logger.error(f"Failed to store upload {upload.filename!r}: {e}")
            raise StorageException()

        logger.debug(f"Stored upload {upload.filename!r} as {filename} ({len(data)} bytes)")
        return StoredFile(
            filename=filename,
            image_path=f"{self._upload_subdir}/{filename}",
            original_name=upload.filename,
            size=len(data),
        )

    async def save_all(self, uploads: Iterable[UploadFile]) -> List[StoredFile]:
        """Persist uploads in order, skipping empty file parts."""
        stored = []
        for upload in uploads:
            # Browsers send an empty part when no file was picked
            if not upload.filename:
                continue
            stored.append(await self.save(upload))
        return stored

    def _write(self, destination: str, data: bytes) -> None:
        os.makedirs(os.path.dirname(destination), exist_ok=True)
        with open(destination, "wb") as f:
            f.write(data)

    @staticmethod
    def _safe_extension(filename: Optional[str]) -> str:
        if not filename:
            return ""
        ext = os.path.splitext(os.path.basename(filename))[1]
        ext = ext.lower()
        return ext if ext in IMAGE_EXTENSIONS else ""
