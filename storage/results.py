"""Persistence helpers for interview results."""
from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from .sqlite import get_conn, utcnow

ResultStatus = Literal["in_progress", "completed", "cancelled"]

_UPDATABLE = {
    "evaluation_id",
    "status",
    "total_questions",
    "total_answers",
    "completion_percentage",
    "duration_minutes",
    "final_feedback",
    "interviewer_notes",
    "technical_assessment_score",
    "soft_skills_assessment_score",
    "overall_impression",
    "next_steps",
    "follow_up_required",
    "follow_up_date",
    "result_data",
}


class InterviewResultRecord(BaseModel):
    id: int
    candidate_id: int
    vacancy_id: int
    evaluation_id: Optional[int] = None
    status: ResultStatus
    total_questions: int = 0
    total_answers: int = 0
    completion_percentage: int = 0
    duration_minutes: Optional[int] = None
    final_feedback: Optional[str] = None
    interviewer_notes: Optional[str] = None
    technical_assessment_score: Optional[int] = None
    soft_skills_assessment_score: Optional[int] = None
    overall_impression: Optional[str] = None
    next_steps: Optional[str] = None
    follow_up_required: bool = False
    follow_up_date: Optional[str] = None
    result_data: Optional[Dict[str, Any]] = None
    started_at: str
    created_at: str
    updated_at: str

    @property
    def is_terminal(self) -> bool:
        return self.status in ("completed", "cancelled")

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "InterviewResultRecord":
        data = dict(row)
        data["follow_up_required"] = bool(data["follow_up_required"])
        data["result_data"] = json.loads(data["result_data"]) if data["result_data"] else None
        return cls(**data)


class VacancyStatistics(BaseModel):
    vacancy_id: int
    total_interviews: int = 0
    completed: int = 0
    in_progress: int = 0
    cancelled: int = 0
    average_completion: Optional[float] = None
    average_duration_minutes: Optional[float] = None


def get_result(candidate_id: int, vacancy_id: int) -> Optional[InterviewResultRecord]:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM interview_results WHERE candidate_id = ? AND vacancy_id = ?",
            (candidate_id, vacancy_id),
        ).fetchone()
    return InterviewResultRecord.from_row(row) if row else None


def open_result(candidate_id: int, vacancy_id: int, *, total_questions: int) -> InterviewResultRecord:
    """Upsert a fresh ``in_progress`` row for the pair with zeroed progress."""

    now = utcnow()
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO interview_results
               (candidate_id, vacancy_id, status, total_questions, total_answers,
                completion_percentage, started_at, created_at, updated_at)
               VALUES (?, ?, 'in_progress', ?, 0, 0, ?, ?, ?)
               ON CONFLICT(candidate_id, vacancy_id) DO UPDATE SET
                 evaluation_id = NULL,
                 status = 'in_progress',
                 total_questions = excluded.total_questions,
                 total_answers = 0,
                 completion_percentage = 0,
                 duration_minutes = NULL,
                 final_feedback = NULL,
                 interviewer_notes = NULL,
                 technical_assessment_score = NULL,
                 soft_skills_assessment_score = NULL,
                 overall_impression = NULL,
                 next_steps = NULL,
                 follow_up_required = 0,
                 follow_up_date = NULL,
                 result_data = NULL,
                 started_at = excluded.started_at,
                 updated_at = excluded.updated_at""",
            (candidate_id, vacancy_id, total_questions, now, now, now),
        )
        row = conn.execute(
            "SELECT * FROM interview_results WHERE candidate_id = ? AND vacancy_id = ?",
            (candidate_id, vacancy_id),
        ).fetchone()
    return InterviewResultRecord.from_row(row)


def update_result(result_id: int, **fields: Any) -> InterviewResultRecord:
    """Patch whitelisted columns of one result row and return the refreshed row."""

    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ValueError(f"Unknown interview result fields: {sorted(unknown)}")
    assignments: List[str] = []
    params: List[Any] = []
    for key, value in fields.items():
        if key == "result_data" and value is not None:
            value = json.dumps(value, ensure_ascii=False)
        elif key == "follow_up_required":
            value = int(bool(value))
        assignments.append(f"{key} = ?")
        params.append(value)
    assignments.append("updated_at = ?")
    params.append(utcnow())
    with get_conn() as conn:
        conn.execute(
            f"UPDATE interview_results SET {', '.join(assignments)} WHERE id = ?",
            [*params, result_id],
        )
        row = conn.execute("SELECT * FROM interview_results WHERE id = ?", (result_id,)).fetchone()
    if row is None:
        raise KeyError(f"Interview result not found: {result_id}")
    return InterviewResultRecord.from_row(row)


def list_results_page(
    *,
    candidate_id: Optional[int] = None,
    vacancy_id: Optional[int] = None,
    status: Optional[str] = None,
    offset: int = 0,
    limit: int = 20,
) -> Tuple[List[InterviewResultRecord], int]:
    clauses: List[str] = []
    params: List[Any] = []
    if candidate_id is not None:
        clauses.append("candidate_id = ?")
        params.append(candidate_id)
    if vacancy_id is not None:
        clauses.append("vacancy_id = ?")
        params.append(vacancy_id)
    if status is not None:
        clauses.append("status = ?")
        params.append(status)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(*) FROM interview_results {where}", params).fetchone()[0]
        rows = conn.execute(
            f"SELECT * FROM interview_results {where} ORDER BY updated_at DESC, id DESC LIMIT ? OFFSET ?",
            [*params, limit, offset],
        ).fetchall()
    return [InterviewResultRecord.from_row(row) for row in rows], int(total)


def vacancy_statistics(vacancy_id: int) -> VacancyStatistics:
    with get_conn() as conn:
        row = conn.execute(
            """SELECT
                 COUNT(*) AS total_interviews,
                 COALESCE(SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END), 0) AS completed,
                 COALESCE(SUM(CASE WHEN status = 'in_progress' THEN 1 ELSE 0 END), 0) AS in_progress,
                 COALESCE(SUM(CASE WHEN status = 'cancelled' THEN 1 ELSE 0 END), 0) AS cancelled,
                 AVG(completion_percentage) AS average_completion,
                 AVG(duration_minutes) AS average_duration_minutes
               FROM interview_results WHERE vacancy_id = ?""",
            (vacancy_id,),
        ).fetchone()
    return VacancyStatistics(vacancy_id=vacancy_id, **dict(row))
