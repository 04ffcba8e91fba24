"""Persist the answer and the assistant reply once generation succeeded."""
from __future__ import annotations

from typing import Any, Callable, Dict

from interview_session import SessionStateMachine
from output_normalizer import normalize_reply, strip_fences, to_flat_string

from ..state import AnswerState


def build(machine: SessionStateMachine) -> Callable[[AnswerState], Dict[str, Any]]:
    def run(state: AnswerState) -> Dict[str, Any]:
        raw = state.get("raw_reply") or ""
        reply = normalize_reply(raw)
        stored = to_flat_string(strip_fences(raw)).strip() or reply
        session, _ = machine.record_answer(state["chat_id"], state["answer"], reply=stored)
        return {
            "reply": reply,
            "question_count": session.question_count,
            "complete": session.question_count >= machine.question_target,
        }

    return run


__all__ = ["build"]
