"""
Upload Service

Stores blog cover images. The blog services only see the ObjectStore
interface; LocalObjectStore keeps the files on disk under the configured
upload directory.
"""

import io
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from hellorun.config import settings
from hellorun.exceptions import StorageFailure, UploadRejected
from hellorun.utils.slugify import slugify

logger = logging.getLogger(__name__)

COVER_PREFIX = "blog-covers"

# Allowed cover types
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": [".jpg", ".jpeg"],
    "image/png": [".png"],
    "image/webp": [".webp"],
}


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class ObjectStore(Protocol):
    async def upload(self, owner_id: int, file: UploadFile) -> StoredObject: ...

    async def delete(self, keys: Sequence[str]) -> None: ...

    def key_from_public_url(self, url: Optional[str]) -> str: ...


class LocalObjectStore:
    """Object store backed by the local filesystem"""

    def __init__(
        self,
        root: Optional[str] = None,
        base_url: Optional[str] = None,
        max_size: Optional[int] = None,
        allowed_types: Optional[Sequence[str]] = None,
    ):
        self.root = Path(root or settings.upload_dir)
        self.base_url = (base_url or settings.upload_base_url).rstrip("/")
        self.max_size = max_size or settings.blog_cover_max_size
        self.allowed_types = set(allowed_types or settings.blog_cover_allowed_types) & set(ALLOWED_IMAGE_TYPES)

    def validate_file(self, file: UploadFile) -> str:
        """
        Validate an uploaded cover image.

        Returns:
            The normalized file extension

        Raises:
            UploadRejected: If the file type or extension is not allowed
        """
        if not file.filename:
            raise UploadRejected("No file provided")

        mime_type = file.content_type
        if not mime_type or mime_type not in self.allowed_types:
            raise UploadRejected(
                "Only JPG, PNG, and WEBP images are allowed for blog covers.", filename=file.filename
            )

        file_ext = Path(file.filename).suffix.lower()
        if file_ext not in ALLOWED_IMAGE_TYPES[mime_type]:
            raise UploadRejected(
                f"File extension {file_ext or '(none)'} does not match MIME type {mime_type}",
                filename=file.filename,
            )
        return file_ext

    async def read_file(self, file: UploadFile) -> bytes:
        buffer = io.BytesIO()
        size = 0
        while chunk := await file.read(8192):
            size += len(chunk)
            if size > self.max_size:
                raise UploadRejected(
                    f"Cover image must be {self.max_size // (1024 * 1024)}MB or smaller.", filename=file.filename
                )
            buffer.write(chunk)
        return buffer.getvalue()

    @staticmethod
    def verify_image(data: bytes, filename: Optional[str]) -> None:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise UploadRejected("Uploaded cover is not a valid image.", filename=filename) from e

    def build_key(self, owner_id: int, filename: str, file_ext: str) -> str:
        stem = slugify(Path(filename).stem)[:60] or "cover"
        return f"{COVER_PREFIX}/{owner_id}_{uuid.uuid4().hex}_{stem}{file_ext}"

    async def upload(self, owner_id: int, file: UploadFile) -> StoredObject:
        file_ext = self.validate_file(file)
        data = await self.read_file(file)
        self.verify_image(data, file.filename)

        key = self.build_key(owner_id, file.filename, file_ext)
        path = self.root / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to store cover image {key}: {e}")
            raise StorageFailure("Failed to store cover image", operation="upload_cover") from e

        logger.info(f"Stored cover image {key} ({len(data)} bytes) for user {owner_id}")
        return StoredObject(key=key, url=f"{self.base_url}/{key}")

    async def delete(self, keys: Sequence[str]) -> None:
        for key in keys:
            if not key:
                continue
            path = self.root / key
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to delete cover image {key}: {e}")
                raise StorageFailure("Failed to delete cover image", operation="delete_cover") from e

    def key_from_public_url(self, url: Optional[str]) -> str:
        """Return the object key for one of our URLs, or '' for anything else."""
        prefix = f"{self.base_url}/"
        value = str(url or "").strip()
        if not value.startswith(prefix):
            return ""
        key = value[len(prefix):]
        if not key.startswith(f"{COVER_PREFIX}/") or ".." in key.split("/"):
            return ""
        return key


def get_object_store() -> ObjectStore:
    return LocalObjectStore()
