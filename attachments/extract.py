"""Best-effort text extraction from uploaded résumés."""
from __future__ import annotations

import logging
from pathlib import Path

from pypdf import PdfReader

logger = logging.getLogger(__name__)

MAX_PDF_PAGES = 50
MAX_CHARS = 20000


def placeholder_text(file_name: str) -> str:
    return f"[Résumé file {file_name}: text could not be extracted automatically]"


def _read_pdf(path: Path) -> str:
    reader = PdfReader(str(path))
    if reader.is_encrypted:
        logger.warning("Encrypted PDF skipped path=%s", path)
        return ""
    chunks = []
    for page in reader.pages[:MAX_PDF_PAGES]:
        text = (page.extract_text() or "").strip()
        if text:
            chunks.append(text)
    return "\n\n".join(chunks)


def extract_text(path: str) -> str:
    """Return the document text, or a placeholder when it cannot be read."""

    file_path = Path(path)
    extension = file_path.suffix.lower()
    try:
        if extension == ".txt":
            text = file_path.read_text(encoding="utf-8", errors="replace")
        elif extension == ".pdf":
            text = _read_pdf(file_path)
        else:
            text = ""
    except Exception as exc:  # noqa: BLE001
        logger.warning("Text extraction failed path=%s: %s", path, exc)
        text = ""
    text = text.strip()
    if not text:
        return placeholder_text(file_path.name)
    return text[:MAX_CHARS]


__all__ = ["extract_text", "placeholder_text"]
