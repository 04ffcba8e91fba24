from __future__ import annotations  # Candidate interview state machine

import datetime as dt
import logging
from typing import Callable, Optional, Tuple

from interview_results import InterviewResultTracker
from observability import log_event
from storage.turns import Turn, TurnKind
from storage.vacancies import Vacancy, get_vacancy
from turn_store import TurnStore

from .state import SessionState, SessionStore, _utcnow


logger = logging.getLogger(__name__)

RESET_REASON = "user-initiated reset"


class SessionError(Exception):  # Base class for user-correctable session errors
    pass


class NoActiveSession(SessionError):  # Answer received before a vacancy was selected
    pass


class VacancyNotFound(SessionError):  # Unknown or inactive vacancy
    pass


class InterviewAlreadyCompleted(SessionError):  # Answer received after the final question
    pass


class SessionStateMachine:  # selecting_vacancy -> interviewing -> completed, reset from anywhere
    def __init__(
        self,
        store: SessionStore,
        turns: TurnStore,
        results: InterviewResultTracker,
        *,
        question_target: int = 5,
        vacancy_lookup: Callable[[int], Optional[Vacancy]] = get_vacancy,
        now: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._turns = turns
        self._results = results
        self._target = question_target
        self._vacancy_lookup = vacancy_lookup
        self._now = now

    @property
    def question_target(self) -> int:
        return self._target

    def get(self, chat_id: str) -> SessionState:
        state = self._store.get(chat_id)
        return state if state is not None else SessionState(chat_id=chat_id, last_activity=self._now())

    def begin(self, chat_id: str, candidate_id: int) -> SessionState:  # Enter vacancy selection
        state = SessionState(chat_id=chat_id, candidate_id=candidate_id, last_activity=self._now())
        self._save(state)
        log_event("session.begin", chat_id, stage=state.stage)
        return state

    def select_vacancy(self, chat_id: str, vacancy_id: int, *, candidate_id: Optional[int] = None) -> Tuple[SessionState, Vacancy]:
        vacancy = self._vacancy_lookup(vacancy_id)
        if vacancy is None or not vacancy.is_active:
            raise VacancyNotFound(f"Vacancy {vacancy_id} is not available")
        state = self.get(chat_id)
        candidate = candidate_id if candidate_id is not None else state.candidate_id
        if candidate is None:
            raise NoActiveSession("Candidate is not registered for this chat")
        self._turns.clear(candidate, vacancy.id)
        self._results.start_interview(candidate, vacancy.id)
        self._results.update_progress(candidate, vacancy.id, 0)
        now = self._now()
        state = state.model_copy(
            update={
                "candidate_id": candidate,
                "stage": "interviewing",
                "current_vacancy_id": vacancy.id,
                "question_count": 0,
                "started_at": now,
            }
        )
        self._save(state)
        log_event("session.vacancy_selected", chat_id, stage=state.stage, vacancy_id=vacancy.id)
        return state, vacancy

    def require_interviewing(self, chat_id: str) -> SessionState:
        state = self.get(chat_id)
        if state.stage == "completed":
            raise InterviewAlreadyCompleted("Interview already finished")
        if state.stage != "interviewing" or state.current_vacancy_id is None or state.candidate_id is None:
            raise NoActiveSession("No vacancy selected")
        return state

    def record_answer(
        self, chat_id: str, text: str, *, kind: TurnKind = "text", reply: Optional[str] = None
    ) -> Tuple[SessionState, Turn]:
        """Store the answer, plus the assistant reply in the same transaction when given, then count it."""

        state = self.require_interviewing(chat_id)
        candidate_id, vacancy_id = state.candidate_id, state.current_vacancy_id
        if candidate_id is None or vacancy_id is None:
            raise NoActiveSession("No vacancy selected")
        if reply is None:
            turn = self._turns.append(candidate_id, vacancy_id, "candidate", text, kind=kind)
        else:
            turn, _ = self._turns.append_exchange(candidate_id, vacancy_id, text, reply, kind=kind)
        state = state.model_copy(update={"question_count": state.question_count + 1})
        self._save(state)
        self._results.update_progress(candidate_id, vacancy_id, state.question_count)
        log_event("session.answer", chat_id, stage=state.stage, question_count=state.question_count)
        return state, turn

    def is_complete(self, chat_id: str) -> bool:
        return self.get(chat_id).question_count >= self._target

    def complete(self, chat_id: str) -> bool:  # True only for the first transition into completed
        state = self._store.get(chat_id)
        if state is None or state.stage != "interviewing" or state.question_count < self._target:
            return False
        self._save(state.model_copy(update={"stage": "completed"}))
        log_event("session.completed", chat_id, stage="completed", question_count=state.question_count)
        return True

    def reset(self, chat_id: str, *, candidate_id: Optional[int] = None) -> None:
        state = self._store.get(chat_id)
        candidate = candidate_id
        if state is not None and state.candidate_id is not None:
            candidate = state.candidate_id
        if state is not None and candidate is not None and state.current_vacancy_id is not None:
            self._results.cancel_interview(candidate, state.current_vacancy_id, RESET_REASON)
        self._store.delete(chat_id)
        if candidate is not None:
            self._turns.clear(candidate)
        log_event("session.reset", chat_id, stage="selecting_vacancy")

    def _save(self, state: SessionState) -> None:
        self._store.set(state.model_copy(update={"last_activity": self._now()}))


__all__ = [
    "InterviewAlreadyCompleted",
    "NoActiveSession",
    "RESET_REASON",
    "SessionError",
    "SessionStateMachine",
    "VacancyNotFound",
]
