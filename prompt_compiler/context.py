"""Shared prompt fragments built from domain records."""
from __future__ import annotations

import json
from typing import Optional

from storage.vacancies import Vacancy


def vacancy_context(vacancy: Optional[Vacancy]) -> str:
    if vacancy is None:
        return ""
    weights = vacancy.evaluation_weights
    return (
        f"Vacancy: {vacancy.title}\n"
        f"Description: {vacancy.description}\n"
        f"Requirements: {json.dumps(vacancy.requirements, indent=2, ensure_ascii=False)}\n"
        f"Evaluation weights: technical skills {weights.technical_skills}%, "
        f"communication {weights.communication}%, problem solving {weights.problem_solving}%"
    )


__all__ = ["vacancy_context"]
