"""Prompt composition node."""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from prompt_compiler import INTERVIEW_CHAT, PromptCompiler, vacancy_context
from storage.vacancies import Vacancy
from turn_store import SENDER_LABELS, TurnStore, render_turns

from ..state import AnswerState


def build(
    compiler: PromptCompiler,
    turns: TurnStore,
    vacancy_lookup: Callable[[int], Optional[Vacancy]],
    *,
    context_window: int,
    question_target: int,
) -> Callable[[AnswerState], Dict[str, Any]]:
    def run(state: AnswerState) -> Dict[str, Any]:
        # The pending answer is not stored until generation succeeds, so it is
        # appended here as the newest line of the window.
        previous = turns.recent(state["candidate_id"], state["vacancy_id"], context_window - 1)
        pending = f"{SENDER_LABELS['candidate']}: {state['answer']}"
        history = render_turns(previous)
        conversation = f"{history}\n\n{pending}" if history else pending
        prompt = compiler.render(
            INTERVIEW_CHAT,
            {
                "vacancy_context": vacancy_context(vacancy_lookup(state["vacancy_id"])),
                "conversation_context": conversation,
                "question_count": state["question_count"] + 1,
                "question_target": question_target,
                "candidate_message": state["answer"],
            },
        )
        return {"prompt": prompt}

    return run


__all__ = ["build"]
