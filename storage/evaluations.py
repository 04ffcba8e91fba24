"""Persistence helpers for interview evaluations."""
from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from .sqlite import get_conn, utcnow

Recommendation = Literal["proceed", "reject", "clarify"]


class EvaluationPayload(BaseModel):
    candidate_id: int
    vacancy_id: int
    overall_score: int = Field(ge=0, le=100)
    technical_score: int = Field(ge=0, le=100)
    communication_score: int = Field(ge=0, le=100)
    problem_solving_score: int = Field(ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    contradictions: List[str] = Field(default_factory=list)
    recommendation: Recommendation
    feedback: str
    analysis_data: Dict[str, Any] = Field(default_factory=dict)


class EvaluationRecord(EvaluationPayload):
    id: int
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "EvaluationRecord":
        data = dict(row)
        for key in ("strengths", "gaps", "contradictions"):
            data[key] = json.loads(data[key] or "[]")
        data["analysis_data"] = json.loads(data["analysis_data"] or "{}")
        return cls(**data)


def upsert_evaluation(**data: Any) -> EvaluationRecord:
    """Insert or replace the evaluation for the (candidate, vacancy) pair."""

    payload = EvaluationPayload(**data)
    now = utcnow()
    values = (
        payload.overall_score,
        payload.technical_score,
        payload.communication_score,
        payload.problem_solving_score,
        json.dumps(payload.strengths, ensure_ascii=False),
        json.dumps(payload.gaps, ensure_ascii=False),
        json.dumps(payload.contradictions, ensure_ascii=False),
        payload.recommendation,
        payload.feedback,
        json.dumps(payload.analysis_data, ensure_ascii=False),
    )
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO evaluations
               (candidate_id, vacancy_id, overall_score, technical_score, communication_score,
                problem_solving_score, strengths, gaps, contradictions, recommendation, feedback,
                analysis_data, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(candidate_id, vacancy_id) DO UPDATE SET
                 overall_score = excluded.overall_score,
                 technical_score = excluded.technical_score,
                 communication_score = excluded.communication_score,
                 problem_solving_score = excluded.problem_solving_score,
                 strengths = excluded.strengths,
                 gaps = excluded.gaps,
                 contradictions = excluded.contradictions,
                 recommendation = excluded.recommendation,
                 feedback = excluded.feedback,
                 analysis_data = excluded.analysis_data,
                 updated_at = excluded.updated_at""",
            (payload.candidate_id, payload.vacancy_id, *values, now, now),
        )
        row = conn.execute(
            "SELECT * FROM evaluations WHERE candidate_id = ? AND vacancy_id = ?",
            (payload.candidate_id, payload.vacancy_id),
        ).fetchone()
    return EvaluationRecord.from_row(row)


def get_evaluation(evaluation_id: int) -> Optional[EvaluationRecord]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM evaluations WHERE id = ?", (evaluation_id,)).fetchone()
    return EvaluationRecord.from_row(row) if row else None


def get_evaluation_for_pair(candidate_id: int, vacancy_id: int) -> Optional[EvaluationRecord]:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM evaluations WHERE candidate_id = ? AND vacancy_id = ?",
            (candidate_id, vacancy_id),
        ).fetchone()
    return EvaluationRecord.from_row(row) if row else None


def list_evaluations_page(
    *,
    candidate_id: Optional[int] = None,
    vacancy_id: Optional[int] = None,
    recommendation: Optional[str] = None,
    min_score: Optional[int] = None,
    max_score: Optional[int] = None,
    offset: int = 0,
    limit: int = 20,
) -> Tuple[List[EvaluationRecord], int]:
    clauses: List[str] = []
    params: List[Any] = []
    if candidate_id is not None:
        clauses.append("candidate_id = ?")
        params.append(candidate_id)
    if vacancy_id is not None:
        clauses.append("vacancy_id = ?")
        params.append(vacancy_id)
    if recommendation is not None:
        clauses.append("recommendation = ?")
        params.append(recommendation)
    if min_score is not None:
        clauses.append("overall_score >= ?")
        params.append(min_score)
    if max_score is not None:
        clauses.append("overall_score <= ?")
        params.append(max_score)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(*) FROM evaluations {where}", params).fetchone()[0]
        rows = conn.execute(
            f"SELECT * FROM evaluations {where} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
            [*params, limit, offset],
        ).fetchall()
    return [EvaluationRecord.from_row(row) for row in rows], int(total)
