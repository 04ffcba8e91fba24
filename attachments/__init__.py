"""Résumé upload handling."""
from .extract import extract_text, placeholder_text
from .storage import (
    AttachmentError,
    FileStorage,
    FileTooLarge,
    MissingFileName,
    StoredFile,
    UnsupportedFileType,
    sanitize_file_name,
)

__all__ = [
    "AttachmentError",
    "FileStorage",
    "FileTooLarge",
    "MissingFileName",
    "StoredFile",
    "UnsupportedFileType",
    "extract_text",
    "placeholder_text",
    "sanitize_file_name",
]
