from __future__ import annotations  # Durable mirror of interview progress and outcome

import datetime as dt
import logging
import math
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field

from storage.results import (
    InterviewResultRecord,
    VacancyStatistics,
    get_result,
    open_result,
    update_result,
    vacancy_statistics,
)


logger = logging.getLogger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def completion_percentage(answered: int, target: int) -> int:  # Half-up rounding, capped at 100
    if target <= 0:
        return 100
    return min(100, int(math.floor(answered / target * 100 + 0.5)))


class HrNotes(BaseModel):  # Reviewer-facing summary written when an interview completes
    technical_score: Optional[int] = Field(default=None, ge=0, le=100)
    soft_skills_score: Optional[int] = Field(default=None, ge=0, le=100)
    overall_impression: Optional[str] = None
    next_steps: Optional[str] = None
    follow_up_required: bool = False
    interviewer_notes: Optional[str] = None


class InterviewResultTracker:  # Upserts keyed on (candidate, vacancy); completed and cancelled are terminal
    def __init__(self, *, question_target: int = 5, now: Callable[[], dt.datetime] = _utcnow) -> None:
        self._target = question_target
        self._now = now

    @property
    def question_target(self) -> int:
        return self._target

    def get(self, candidate_id: int, vacancy_id: int) -> Optional[InterviewResultRecord]:
        return get_result(candidate_id, vacancy_id)

    def start_interview(self, candidate_id: int, vacancy_id: int) -> InterviewResultRecord:  # Restarts keep the row id
        record = open_result(candidate_id, vacancy_id, total_questions=self._target)
        logger.info("Interview started candidate=%s vacancy=%s result=%s", candidate_id, vacancy_id, record.id)
        return record

    def update_progress(self, candidate_id: int, vacancy_id: int, answered: int) -> Optional[InterviewResultRecord]:
        existing = get_result(candidate_id, vacancy_id)
        if existing is None:
            logger.warning("No interview result to update candidate=%s vacancy=%s", candidate_id, vacancy_id)
            return None
        if existing.is_terminal:
            return existing
        return update_result(
            existing.id,
            total_answers=answered,
            completion_percentage=completion_percentage(answered, self._target),
        )

    def complete_interview(
        self,
        candidate_id: int,
        vacancy_id: int,
        *,
        evaluation_id: Optional[int] = None,
        final_feedback: Optional[str] = None,
        hr_notes: Optional[HrNotes] = None,
        session_data: Optional[Dict[str, Any]] = None,
        conversation_length: int = 0,
    ) -> Optional[InterviewResultRecord]:
        existing = get_result(candidate_id, vacancy_id)
        if existing is None:
            logger.warning("No interview result to complete candidate=%s vacancy=%s", candidate_id, vacancy_id)
            return None
        if existing.is_terminal:
            return existing
        now = self._now()
        fields: Dict[str, Any] = {
            "status": "completed",
            "evaluation_id": evaluation_id,
            "duration_minutes": self._duration_minutes(existing.started_at, now),
            "final_feedback": final_feedback,
            "result_data": {
                "sessionData": session_data or {},
                "completedAt": now.isoformat(),
                "conversationLength": conversation_length,
            },
        }
        if hr_notes is not None:
            fields.update(
                technical_assessment_score=hr_notes.technical_score,
                soft_skills_assessment_score=hr_notes.soft_skills_score,
                overall_impression=hr_notes.overall_impression,
                next_steps=hr_notes.next_steps,
                follow_up_required=hr_notes.follow_up_required,
                interviewer_notes=hr_notes.interviewer_notes,
            )
        record = update_result(existing.id, **fields)
        logger.info(
            "Interview completed candidate=%s vacancy=%s evaluation=%s duration=%smin",
            candidate_id,
            vacancy_id,
            evaluation_id,
            record.duration_minutes,
        )
        return record

    def cancel_interview(self, candidate_id: int, vacancy_id: int, reason: str) -> Optional[InterviewResultRecord]:
        existing = get_result(candidate_id, vacancy_id)
        if existing is None or existing.status != "in_progress":
            return existing
        now = self._now()
        record = update_result(
            existing.id,
            status="cancelled",
            duration_minutes=self._duration_minutes(existing.started_at, now),
            interviewer_notes=f"Interview cancelled: {reason}",
            result_data={"cancelledAt": now.isoformat(), "reason": reason},
        )
        logger.info("Interview cancelled candidate=%s vacancy=%s reason=%s", candidate_id, vacancy_id, reason)
        return record

    def statistics(self, vacancy_id: int) -> VacancyStatistics:
        return vacancy_statistics(vacancy_id)

    @staticmethod
    def _duration_minutes(started_at: str, now: dt.datetime) -> int:
        started = dt.datetime.fromisoformat(started_at)
        if started.tzinfo is None:
            started = started.replace(tzinfo=dt.timezone.utc)
        return max(0, round((now - started).total_seconds() / 60))


__all__ = ["HrNotes", "InterviewResultTracker", "completion_percentage"]
