"""Lightweight CLI helpers for inspecting interview outcome tables."""
from __future__ import annotations

import argparse
import sqlite3

from config.settings import settings


def tail_results(limit: int = 20) -> None:
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT updated_at, candidate_id, vacancy_id, status, total_answers, total_questions,
                   completion_percentage, duration_minutes, evaluation_id
            FROM interview_results
            ORDER BY updated_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        for row in cursor.fetchall():
            ts, candidate_id, vacancy_id, status, answers, questions, pct, duration, evaluation_id = row
            print(
                f"[{ts}] candidate={candidate_id} vacancy={vacancy_id} {status} "
                f"{answers}/{questions} ({pct}%) duration={duration}min evaluation={evaluation_id}"
            )
    finally:
        conn.close()


def tail_evaluations(limit: int = 20) -> None:
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT updated_at, candidate_id, vacancy_id, overall_score, technical_score,
                   communication_score, problem_solving_score, recommendation
            FROM evaluations
            ORDER BY updated_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        for row in cursor.fetchall():
            ts, candidate_id, vacancy_id, overall, technical, communication, problem_solving, rec = row
            print(
                f"[{ts}] candidate={candidate_id} vacancy={vacancy_id} overall={overall} "
                f"tech={technical} comm={communication} ps={problem_solving} -> {rec}"
            )
    finally:
        conn.close()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-results", type=int, help="Show the latest interview results")
    parser.add_argument("--tail-evaluations", type=int, help="Show the latest evaluations")
    args = parser.parse_args()

    if args.tail_results:
        tail_results(args.tail_results)
    if args.tail_evaluations:
        tail_evaluations(args.tail_evaluations)


if __name__ == "__main__":
    main()
