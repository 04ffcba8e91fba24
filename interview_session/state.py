"""Per-chat interview session state and its storage interface."""
from __future__ import annotations

import datetime as dt
import threading
from typing import Dict, Literal, Optional, Protocol

from pydantic import BaseModel, Field

Stage = Literal["selecting_vacancy", "interviewing", "completed"]


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class SessionState(BaseModel):
    """Ephemeral progress of one chat; lost on restart."""

    chat_id: str
    candidate_id: Optional[int] = None
    stage: Stage = "selecting_vacancy"
    current_vacancy_id: Optional[int] = None
    question_count: int = Field(default=0, ge=0)
    started_at: Optional[dt.datetime] = None
    last_activity: dt.datetime = Field(default_factory=_utcnow)


class SessionStore(Protocol):
    def get(self, chat_id: str) -> Optional[SessionState]: ...

    def set(self, state: SessionState) -> None: ...

    def delete(self, chat_id: str) -> None: ...


class InMemorySessionStore:
    """Process-local store; hands out copies so callers cannot mutate shared state."""

    def __init__(self) -> None:
        self._states: Dict[str, SessionState] = {}
        self._guard = threading.Lock()

    def get(self, chat_id: str) -> Optional[SessionState]:
        with self._guard:
            state = self._states.get(chat_id)
            return state.model_copy() if state is not None else None

    def set(self, state: SessionState) -> None:
        with self._guard:
            self._states[state.chat_id] = state.model_copy()

    def delete(self, chat_id: str) -> None:
        with self._guard:
            self._states.pop(chat_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._states)


__all__ = ["InMemorySessionStore", "SessionState", "SessionStore", "Stage"]
