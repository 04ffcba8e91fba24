"""Persistence helpers for prompt templates."""
from __future__ import annotations

import sqlite3
from typing import Any, List, Optional

from pydantic import BaseModel

from .sqlite import get_conn, utcnow


class PromptTemplatePayload(BaseModel):
    name: str
    template: str
    description: Optional[str] = None
    category: str = "general"
    is_active: bool = True


class PromptTemplateRecord(PromptTemplatePayload):
    id: int
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "PromptTemplateRecord":
        data = dict(row)
        data["is_active"] = bool(data["is_active"])
        return cls(**data)


def upsert_template(**data: Any) -> PromptTemplateRecord:
    payload = PromptTemplatePayload(**data)
    now = utcnow()
    with get_conn() as conn:
        conn.execute(
            """INSERT INTO prompt_templates
               (name, description, template, category, is_active, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(name) DO UPDATE SET
                 description = excluded.description,
                 template = excluded.template,
                 category = excluded.category,
                 is_active = excluded.is_active,
                 updated_at = excluded.updated_at""",
            (
                payload.name,
                payload.description,
                payload.template,
                payload.category,
                int(payload.is_active),
                now,
                now,
            ),
        )
        row = conn.execute("SELECT * FROM prompt_templates WHERE name = ?", (payload.name,)).fetchone()
    return PromptTemplateRecord.from_row(row)


def get_active_template(name: str) -> Optional[PromptTemplateRecord]:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM prompt_templates WHERE name = ? AND is_active = 1",
            (name,),
        ).fetchone()
    return PromptTemplateRecord.from_row(row) if row else None


def list_templates() -> List[PromptTemplateRecord]:
    with get_conn() as conn:
        rows = conn.execute("SELECT * FROM prompt_templates ORDER BY name").fetchall()
    return [PromptTemplateRecord.from_row(row) for row in rows]


def insert_template_if_missing(**data: Any) -> bool:
    """Insert a template unless one with the same name exists; return True when inserted."""

    payload = PromptTemplatePayload(**data)
    now = utcnow()
    with get_conn() as conn:
        cur = conn.cursor()
        cur.execute(
            """INSERT OR IGNORE INTO prompt_templates
               (name, description, template, category, is_active, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                payload.name,
                payload.description,
                payload.template,
                payload.category,
                int(payload.is_active),
                now,
                now,
            ),
        )
        return cur.rowcount > 0
