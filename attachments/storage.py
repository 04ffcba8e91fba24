from __future__ import annotations  # Guarded storage of uploaded résumé files

import logging
import re
import time
import uuid
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel

from config.settings import settings


logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class AttachmentError(ValueError):  # Base class for rejected uploads
    pass


class FileTooLarge(AttachmentError):
    pass


class UnsupportedFileType(AttachmentError):
    pass


class MissingFileName(AttachmentError):
    pass


class StoredFile(BaseModel):  # Saved upload
    path: str
    original_name: str
    size: int
    extension: str


def sanitize_file_name(name: str) -> str:  # Keep a safe base name for disk storage
    base = Path(name).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "upload"


class FileStorage:  # Validates size and extension before writing uploads under one directory
    def __init__(
        self,
        root: Optional[str] = None,
        *,
        max_bytes: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None,
    ) -> None:
        self._root = Path(root or settings.UPLOAD_DIR)
        self._max_bytes = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
        extensions = settings.ALLOWED_UPLOAD_EXTENSIONS if allowed_extensions is None else allowed_extensions
        self._extensions = {ext.lower() for ext in extensions}

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def validate(self, file_name: Optional[str], size: Optional[int]) -> str:  # Return the lowercase extension
        if not file_name:
            raise MissingFileName("Upload has no file name")
        if size is not None and size > self._max_bytes:
            raise FileTooLarge(f"File is {size} bytes, limit is {self._max_bytes}")
        extension = Path(file_name).suffix.lower()
        if extension not in self._extensions:
            raise UnsupportedFileType(f"Extension {extension or '(none)'} is not accepted")
        return extension

    def save(self, owner: str, file_name: str, content: bytes) -> StoredFile:
        extension = self.validate(file_name, len(content))
        directory = self._root / sanitize_file_name(owner)
        directory.mkdir(parents=True, exist_ok=True)
        stem = sanitize_file_name(Path(file_name).stem)
        target = directory / f"{int(time.time())}_{uuid.uuid4().hex[:8]}_{stem}{extension}"
        target.write_bytes(content)
        logger.info("Stored upload owner=%s name=%s bytes=%d", owner, file_name, len(content))
        return StoredFile(path=str(target), original_name=file_name, size=len(content), extension=extension)


__all__ = [
    "AttachmentError",
    "FileStorage",
    "FileTooLarge",
    "MissingFileName",
    "StoredFile",
    "UnsupportedFileType",
    "sanitize_file_name",
]
