"""Completion node: evaluate once and finalize the interview result."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from interview_evaluation import EvaluationEngine
from interview_results import InterviewResultTracker
from interview_session import SessionError, SessionStateMachine
from llm_gateway import GenerationError
from observability import log_event
from turn_store import TurnStore

from ..state import AnswerState

logger = logging.getLogger(__name__)


def _close_without_evaluation(
    state: AnswerState,
    results: InterviewResultTracker,
    session_data: Dict[str, Any],
    conversation_length: int,
    exc: BaseException,
) -> Dict[str, Any]:
    # The session is already completed, so the result row must be closed too.
    results.complete_interview(
        state["candidate_id"],
        state["vacancy_id"],
        session_data=session_data,
        conversation_length=conversation_length,
    )
    log_event("evaluation.failed", state["chat_id"], vacancy_id=state["vacancy_id"], outcome=type(exc).__name__)
    return {"evaluation": None, "evaluation_failed": True}


def build(
    machine: SessionStateMachine,
    engine: EvaluationEngine,
    results: InterviewResultTracker,
    turns: TurnStore,
) -> Callable[[AnswerState], Dict[str, Any]]:
    def run(state: AnswerState) -> Dict[str, Any]:
        chat_id = state["chat_id"]
        if not machine.complete(chat_id):
            return {"evaluation": None, "evaluation_failed": False}
        candidate_id, vacancy_id = state["candidate_id"], state["vacancy_id"]
        session_data = {"chatId": chat_id, "questionCount": state["question_count"]}
        conversation_length = len(turns.history(candidate_id, vacancy_id))
        try:
            outcome = engine.evaluate(candidate_id, vacancy_id)
        except (GenerationError, SessionError) as exc:
            logger.error("Evaluation failed chat=%s vacancy=%s: %s", chat_id, vacancy_id, exc)
            return _close_without_evaluation(state, results, session_data, conversation_length, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Evaluation crashed chat=%s vacancy=%s", chat_id, vacancy_id)
            return _close_without_evaluation(state, results, session_data, conversation_length, exc)
        results.complete_interview(
            candidate_id,
            vacancy_id,
            evaluation_id=outcome.evaluation.id,
            final_feedback=outcome.feedback,
            hr_notes=outcome.hr_notes(),
            session_data=session_data,
            conversation_length=conversation_length,
        )
        return {"evaluation": outcome, "evaluation_failed": False}

    return run


__all__ = ["build"]
