"""Per-candidate interview session lifecycle."""
from .machine import (
    RESET_REASON,
    InterviewAlreadyCompleted,
    NoActiveSession,
    SessionError,
    SessionStateMachine,
    VacancyNotFound,
)
from .state import InMemorySessionStore, SessionState, SessionStore, Stage

__all__ = [
    "RESET_REASON",
    "InMemorySessionStore",
    "InterviewAlreadyCompleted",
    "NoActiveSession",
    "SessionError",
    "SessionState",
    "SessionStateMachine",
    "SessionStore",
    "Stage",
    "VacancyNotFound",
]
