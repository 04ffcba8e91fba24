"""Structured event logging for the screening interview pipeline.

``log_event`` writes every event twice: a short human line for the console
and the human log file, and a JSON line for the JSON log file. File output
is controlled by ``ENABLE_FILE_LOGS`` and rotates by size.
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any, Dict, List

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGS = os.getenv("ENABLE_FILE_LOGS", "1") in ("1", "true", "True")
LOG_FILE = os.getenv("LOG_FILE", "logs/screening.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
HUMAN_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Fields shown on the human line, in this order, when present on the event.
HUMAN_FIELDS = (
    "stage",
    "vacancy_id",
    "question_count",
    "evaluation_id",
    "overall",
    "recommendation",
    "fallback",
    "outcome",
    "name",
    "ms",
)

_events = logging.getLogger("screening.events")
_events.setLevel(LOG_LEVEL)
_events.propagate = False


class _JsonLines(logging.Filter):
    def __init__(self, want_json: bool) -> None:
        super().__init__()
        self._want_json = want_json

    def filter(self, record: logging.LogRecord) -> bool:
        return (getattr(record, "is_json", False) is True) == self._want_json


def _human_path(path: str) -> str:
    stem, ext = os.path.splitext(path)
    return f"{stem}-human{ext or '.log'}"


def _rotating(path: str, *, json_lines: bool) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)
    handler.setLevel(LOG_LEVEL)
    if json_lines:
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt=HUMAN_DATEFMT))
    handler.addFilter(_JsonLines(json_lines))
    return handler


def _ensure_handlers() -> None:
    if _events.handlers:
        return

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(LOG_LEVEL)
    console.setFormatter(logging.Formatter(HUMAN_FORMAT, datefmt=HUMAN_DATEFMT))
    console.addFilter(_JsonLines(False))
    _events.addHandler(console)

    if not ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    _events.addHandler(_rotating(LOG_FILE, json_lines=True))
    _events.addHandler(_rotating(_human_path(LOG_FILE), json_lines=False))


def _format_human(event: Dict[str, Any]) -> str:
    parts: List[str] = [f"{event['kind']} chat={event['session_id']}"]
    parts.extend(f"{key}={event[key]}" for key in HUMAN_FIELDS if key in event)
    return " ".join(parts)


def _emit(message: str, *, is_json: bool) -> None:
    record = _events.makeRecord(
        name=_events.name,
        level=logging.INFO,
        fn="",
        lno=0,
        msg=message,
        args=(),
        exc_info=None,
    )
    record.is_json = is_json  # type: ignore[attr-defined]
    _events.handle(record)


def log_event(kind: str, session_id: str, **fields: Any) -> None:
    """Record a pipeline event such as ``session.answer`` or ``evaluation.stored``.

    ``session_id`` is the chat id, or ``"<candidate>:<vacancy>"`` for work
    that is not tied to a chat.
    """

    _ensure_handlers()
    event: Dict[str, Any] = {
        "event_id": uuid.uuid4().hex,
        "ts": time.time(),
        "kind": kind,
        "session_id": session_id,
    }
    event.update(fields)
    _emit(_format_human(event), is_json=False)
    if ENABLE_FILE_LOGS:
        _emit(json.dumps(event, ensure_ascii=False, default=str), is_json=True)


__all__ = ["log_event"]
