"""Persistence helpers for vacancies."""
from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .sqlite import get_conn, utcnow


class EvaluationWeights(BaseModel):
    technical_skills: int = Field(default=50, ge=0, le=100)
    communication: int = Field(default=30, ge=0, le=100)
    problem_solving: int = Field(default=20, ge=0, le=100)


class VacancyPayload(BaseModel):
    title: str
    description: str
    requirements: Dict[str, Any] = Field(default_factory=dict)
    evaluation_weights: EvaluationWeights = Field(default_factory=EvaluationWeights)
    status: Literal["active", "inactive"] = "active"


class Vacancy(VacancyPayload):
    id: int
    created_at: str
    updated_at: str

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Vacancy":
        data = dict(row)
        data["requirements"] = json.loads(data["requirements"] or "{}")
        data["evaluation_weights"] = json.loads(data["evaluation_weights"] or "{}")
        return cls(**data)


def insert_vacancy(**data: Any) -> int:
    """Insert a vacancy row and return its primary key."""

    payload = VacancyPayload(**data)
    now = utcnow()
    with get_conn() as conn:
        cur = conn.cursor()
        cur.execute(
            """INSERT INTO vacancies
               (title, description, requirements, evaluation_weights, status, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                payload.title,
                payload.description,
                json.dumps(payload.requirements, ensure_ascii=False),
                payload.evaluation_weights.model_dump_json(),
                payload.status,
                now,
                now,
            ),
        )
        return int(cur.lastrowid)


def set_vacancy_status(vacancy_id: int, status: Literal["active", "inactive"]) -> None:
    with get_conn() as conn:
        conn.execute(
            "UPDATE vacancies SET status = ?, updated_at = ? WHERE id = ?",
            (status, utcnow(), vacancy_id),
        )


def get_vacancy(vacancy_id: int) -> Optional[Vacancy]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM vacancies WHERE id = ?", (vacancy_id,)).fetchone()
    return Vacancy.from_row(row) if row else None


def list_active_vacancies() -> List[Vacancy]:
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM vacancies WHERE status = 'active' ORDER BY id"
        ).fetchall()
    return [Vacancy.from_row(row) for row in rows]
