"""Pydantic schemas for the read-only admin API."""
from __future__ import annotations

import math
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if total else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class Page(ApiModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    pagination: Pagination


class TurnOut(ApiModel):
    id: int
    candidate_id: int
    vacancy_id: int
    sender: Literal["candidate", "assistant"]
    kind: str
    content: str
    created_at: str


class EvaluationOut(ApiModel):
    id: int
    candidate_id: int
    vacancy_id: int
    overall_score: int
    technical_score: int
    communication_score: int
    problem_solving_score: int
    strengths: List[str]
    gaps: List[str]
    contradictions: List[str]
    recommendation: Literal["proceed", "reject", "clarify"]
    feedback: str
    analysis_data: Dict[str, Any]
    created_at: str
    updated_at: str


class InterviewResultOut(ApiModel):
    id: int
    candidate_id: int
    vacancy_id: int
    evaluation_id: Optional[int]
    status: Literal["in_progress", "completed", "cancelled"]
    total_questions: int
    total_answers: int
    completion_percentage: int
    duration_minutes: Optional[int]
    final_feedback: Optional[str]
    interviewer_notes: Optional[str]
    technical_assessment_score: Optional[int]
    soft_skills_assessment_score: Optional[int]
    overall_impression: Optional[str]
    next_steps: Optional[str]
    follow_up_required: bool
    follow_up_date: Optional[str]
    result_data: Optional[Dict[str, Any]]
    started_at: str
    created_at: str
    updated_at: str


class VacancyStatisticsOut(ApiModel):
    vacancy_id: int
    total_interviews: int
    completed: int
    in_progress: int
    cancelled: int
    average_completion: Optional[float]
    average_duration_minutes: Optional[float]
