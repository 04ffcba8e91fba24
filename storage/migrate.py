"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS candidates (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  external_user_id TEXT NOT NULL UNIQUE,
  first_name TEXT,
  last_name TEXT,
  username TEXT,
  cv_file_path TEXT,
  cv_file_name TEXT,
  cv_file_size INTEGER,
  cv_uploaded_at TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS vacancies (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title TEXT NOT NULL,
  description TEXT NOT NULL,
  requirements TEXT NOT NULL,
  evaluation_weights TEXT NOT NULL,
  status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'inactive')),
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS turns (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id INTEGER NOT NULL REFERENCES candidates(id),
  vacancy_id INTEGER NOT NULL REFERENCES vacancies(id),
  sender TEXT NOT NULL CHECK (sender IN ('candidate', 'assistant')),
  kind TEXT NOT NULL CHECK (kind IN ('text', 'audio', 'document', 'system')),
  content TEXT NOT NULL,
  metadata TEXT,
  created_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_turns_pair ON turns(candidate_id, vacancy_id, id);
""",
    """
CREATE TABLE IF NOT EXISTS turn_resets (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id INTEGER NOT NULL,
  vacancy_id INTEGER,
  last_turn_id INTEGER NOT NULL,
  created_at TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS evaluations (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id INTEGER NOT NULL REFERENCES candidates(id),
  vacancy_id INTEGER NOT NULL REFERENCES vacancies(id),
  overall_score INTEGER NOT NULL CHECK (overall_score BETWEEN 0 AND 100),
  technical_score INTEGER NOT NULL CHECK (technical_score BETWEEN 0 AND 100),
  communication_score INTEGER NOT NULL CHECK (communication_score BETWEEN 0 AND 100),
  problem_solving_score INTEGER NOT NULL CHECK (problem_solving_score BETWEEN 0 AND 100),
  strengths TEXT NOT NULL,
  gaps TEXT NOT NULL,
  contradictions TEXT NOT NULL,
  recommendation TEXT NOT NULL CHECK (recommendation IN ('proceed', 'reject', 'clarify')),
  feedback TEXT NOT NULL,
  analysis_data TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL,
  UNIQUE(candidate_id, vacancy_id)
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_results (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  candidate_id INTEGER NOT NULL REFERENCES candidates(id),
  vacancy_id INTEGER NOT NULL REFERENCES vacancies(id),
  evaluation_id INTEGER REFERENCES evaluations(id) ON DELETE SET NULL,
  status TEXT NOT NULL CHECK (status IN ('in_progress', 'completed', 'cancelled')),
  total_questions INTEGER NOT NULL DEFAULT 0,
  total_answers INTEGER NOT NULL DEFAULT 0,
  completion_percentage INTEGER NOT NULL DEFAULT 0 CHECK (completion_percentage BETWEEN 0 AND 100),
  duration_minutes INTEGER,
  final_feedback TEXT,
  interviewer_notes TEXT,
  technical_assessment_score INTEGER,
  soft_skills_assessment_score INTEGER,
  overall_impression TEXT,
  next_steps TEXT,
  follow_up_required INTEGER NOT NULL DEFAULT 0,
  follow_up_date TEXT,
  result_data TEXT,
  started_at TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL,
  UNIQUE(candidate_id, vacancy_id)
);
""",
    """
CREATE TABLE IF NOT EXISTS prompt_templates (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL UNIQUE,
  description TEXT,
  template TEXT NOT NULL,
  category TEXT NOT NULL DEFAULT 'general',
  is_active INTEGER NOT NULL DEFAULT 1,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
""",
]


def migrate(db_path: str) -> None:
    """Apply the schema to ``db_path``, creating the file when needed."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
    print(f"Migrated {settings.DB_PATH}")
