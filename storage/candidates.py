"""Persistence helpers for candidates."""
from __future__ import annotations

import sqlite3
from typing import Any, Optional

from pydantic import BaseModel

from .sqlite import get_conn, utcnow


class CandidatePayload(BaseModel):
    external_user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None


class Candidate(CandidatePayload):
    id: int
    cv_file_path: Optional[str] = None
    cv_file_name: Optional[str] = None
    cv_file_size: Optional[int] = None
    cv_uploaded_at: Optional[str] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Candidate":
        return cls(**dict(row))


def upsert_candidate(**data: Any) -> Candidate:
    """Create the candidate or refresh its profile fields; return the stored row."""

    payload = CandidatePayload(**data)
    now = utcnow()
    with get_conn() as conn:
        conn.execute(
            """INSERT OR IGNORE INTO candidates
               (external_user_id, first_name, last_name, username, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (payload.external_user_id, payload.first_name, payload.last_name, payload.username, now, now),
        )
        conn.execute(
            """UPDATE candidates
               SET first_name = ?, last_name = ?, username = ?, updated_at = ?
               WHERE external_user_id = ?""",
            (payload.first_name, payload.last_name, payload.username, now, payload.external_user_id),
        )
        row = conn.execute(
            "SELECT * FROM candidates WHERE external_user_id = ?",
            (payload.external_user_id,),
        ).fetchone()
    return Candidate.from_row(row)


def get_candidate(candidate_id: int) -> Optional[Candidate]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM candidates WHERE id = ?", (candidate_id,)).fetchone()
    return Candidate.from_row(row) if row else None


def get_candidate_by_external_id(external_user_id: str) -> Optional[Candidate]:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM candidates WHERE external_user_id = ?",
            (external_user_id,),
        ).fetchone()
    return Candidate.from_row(row) if row else None


def update_cv(candidate_id: int, *, file_path: str, file_name: str, file_size: int) -> None:
    """Record the most recent résumé upload on the candidate."""

    now = utcnow()
    with get_conn() as conn:
        conn.execute(
            """UPDATE candidates
               SET cv_file_path = ?, cv_file_name = ?, cv_file_size = ?, cv_uploaded_at = ?, updated_at = ?
               WHERE id = ?""",
            (file_path, file_name, file_size, now, now, candidate_id),
        )
