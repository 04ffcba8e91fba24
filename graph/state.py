"""Shared LangGraph state definition for one candidate answer."""
from __future__ import annotations

from typing import Any, Optional, TypedDict


class AnswerState(TypedDict, total=False):
    """Values flowing through the answer graph; nodes return partial updates."""

    chat_id: str
    candidate_id: int
    vacancy_id: int
    question_count: int
    answer: str

    prompt: str
    raw_reply: str
    reply: str

    complete: bool
    evaluation: Optional[Any]
    evaluation_failed: bool
