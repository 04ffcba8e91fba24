"""Persistence helpers for conversation turns and history resets."""
from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from .sqlite import get_conn, utcnow

Sender = Literal["candidate", "assistant"]
TurnKind = Literal["text", "audio", "document", "system"]


class TurnPayload(BaseModel):
    candidate_id: int
    vacancy_id: int
    sender: Sender
    kind: TurnKind = "text"
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Turn(TurnPayload):
    id: int
    created_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Turn":
        data = dict(row)
        data["metadata"] = json.loads(data["metadata"] or "{}")
        return cls(**data)


_WATERMARK_SQL = """
    SELECT COALESCE(MAX(last_turn_id), 0) FROM turn_resets
    WHERE candidate_id = ? AND (vacancy_id = ? OR vacancy_id IS NULL)
"""


def _insert(cur: sqlite3.Cursor, payload: TurnPayload, timestamp: str) -> Turn:
    cur.execute(
        """INSERT INTO turns
           (candidate_id, vacancy_id, sender, kind, content, metadata, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (
            payload.candidate_id,
            payload.vacancy_id,
            payload.sender,
            payload.kind,
            payload.content,
            json.dumps(payload.metadata, ensure_ascii=False),
            timestamp,
        ),
    )
    return Turn(id=int(cur.lastrowid), created_at=timestamp, **payload.model_dump())


def insert_turn(**data: Any) -> Turn:
    """Append a turn row and return it with its id and timestamp."""

    payload = TurnPayload(**data)
    with get_conn() as conn:
        return _insert(conn.cursor(), payload, utcnow())


def insert_exchange(
    candidate_id: int,
    vacancy_id: int,
    answer: str,
    reply: str,
    *,
    kind: TurnKind = "text",
) -> Tuple[Turn, Turn]:
    """Append a candidate answer and the assistant reply in one transaction."""

    question = TurnPayload(candidate_id=candidate_id, vacancy_id=vacancy_id, sender="candidate", kind=kind, content=answer)
    response = TurnPayload(candidate_id=candidate_id, vacancy_id=vacancy_id, sender="assistant", content=reply)
    timestamp = utcnow()
    with get_conn() as conn:
        cur = conn.cursor()
        return _insert(cur, question, timestamp), _insert(cur, response, timestamp)


def insert_reset(candidate_id: int, vacancy_id: Optional[int] = None) -> int:
    """Hide every turn written so far for the candidate (optionally one vacancy)."""

    with get_conn() as conn:
        cur = conn.cursor()
        cur.execute(
            """INSERT INTO turn_resets (candidate_id, vacancy_id, last_turn_id, created_at)
               VALUES (?, ?, (SELECT COALESCE(MAX(id), 0) FROM turns), ?)""",
            (candidate_id, vacancy_id, utcnow()),
        )
        return int(cur.lastrowid)


def list_effective_turns(candidate_id: int, vacancy_id: int, limit: Optional[int] = None) -> List[Turn]:
    """Turns after the latest reset, oldest first; ``limit`` keeps the newest ones."""

    with get_conn() as conn:
        watermark = conn.execute(_WATERMARK_SQL, (candidate_id, vacancy_id)).fetchone()[0]
        if limit is None:
            rows = conn.execute(
                """SELECT * FROM turns
                   WHERE candidate_id = ? AND vacancy_id = ? AND id > ?
                   ORDER BY id ASC""",
                (candidate_id, vacancy_id, watermark),
            ).fetchall()
        else:
            rows = conn.execute(
                """SELECT * FROM (
                       SELECT * FROM turns
                       WHERE candidate_id = ? AND vacancy_id = ? AND id > ?
                       ORDER BY id DESC LIMIT ?
                   ) ORDER BY id ASC""",
                (candidate_id, vacancy_id, watermark, limit),
            ).fetchall()
    return [Turn.from_row(row) for row in rows]


def list_turns_page(
    *,
    candidate_id: Optional[int] = None,
    vacancy_id: Optional[int] = None,
    sender: Optional[str] = None,
    offset: int = 0,
    limit: int = 20,
) -> Tuple[List[Turn], int]:
    """Full audit listing, including turns hidden by resets."""

    clauses: List[str] = []
    params: List[Any] = []
    if candidate_id is not None:
        clauses.append("candidate_id = ?")
        params.append(candidate_id)
    if vacancy_id is not None:
        clauses.append("vacancy_id = ?")
        params.append(vacancy_id)
    if sender is not None:
        clauses.append("sender = ?")
        params.append(sender)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(*) FROM turns {where}", params).fetchone()[0]
        rows = conn.execute(
            f"SELECT * FROM turns {where} ORDER BY id ASC LIMIT ? OFFSET ?",
            [*params, limit, offset],
        ).fetchall()
    return [Turn.from_row(row) for row in rows], int(total)
