"""FastAPI routes exposing read-only interview projections."""
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Query

from api.schemas import (
    EvaluationOut,
    InterviewResultOut,
    Page,
    Pagination,
    TurnOut,
    VacancyStatisticsOut,
)
from storage.evaluations import get_evaluation, list_evaluations_page
from storage.results import list_results_page, vacancy_statistics
from storage.turns import list_turns_page
from storage.vacancies import get_vacancy

MAX_PAGE_SIZE = 100

router = APIRouter(prefix="/api/admin")


def _window(page: int, limit: int) -> tuple[int, int]:
    limit = min(limit, MAX_PAGE_SIZE)
    return limit, (page - 1) * limit


@router.get("/turns", response_model=Page[TurnOut])
def list_turns(
    candidate_id: Optional[int] = Query(None, alias="candidateId"),
    vacancy_id: Optional[int] = Query(None, alias="vacancyId"),
    sender: Optional[Literal["candidate", "assistant"]] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
) -> Page[TurnOut]:
    limit, offset = _window(page, limit)
    rows, total = list_turns_page(
        candidate_id=candidate_id,
        vacancy_id=vacancy_id,
        sender=sender,
        offset=offset,
        limit=limit,
    )
    return Page[TurnOut](
        data=[TurnOut.model_validate(row.model_dump()) for row in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/evaluations", response_model=Page[EvaluationOut])
def list_evaluations(
    candidate_id: Optional[int] = Query(None, alias="candidateId"),
    vacancy_id: Optional[int] = Query(None, alias="vacancyId"),
    recommendation: Optional[Literal["proceed", "reject", "clarify"]] = Query(None),
    min_score: Optional[int] = Query(None, alias="minScore", ge=0, le=100),
    max_score: Optional[int] = Query(None, alias="maxScore", ge=0, le=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
) -> Page[EvaluationOut]:
    if min_score is not None and max_score is not None and min_score > max_score:
        raise HTTPException(status_code=422, detail="minScore must not exceed maxScore")
    limit, offset = _window(page, limit)
    rows, total = list_evaluations_page(
        candidate_id=candidate_id,
        vacancy_id=vacancy_id,
        recommendation=recommendation,
        min_score=min_score,
        max_score=max_score,
        offset=offset,
        limit=limit,
    )
    return Page[EvaluationOut](
        data=[EvaluationOut.model_validate(row.model_dump()) for row in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationOut)
def read_evaluation(evaluation_id: int) -> EvaluationOut:
    record = get_evaluation(evaluation_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return EvaluationOut.model_validate(record.model_dump())


@router.get("/interview-results", response_model=Page[InterviewResultOut])
def list_interview_results(
    candidate_id: Optional[int] = Query(None, alias="candidateId"),
    vacancy_id: Optional[int] = Query(None, alias="vacancyId"),
    status: Optional[Literal["in_progress", "completed", "cancelled"]] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
) -> Page[InterviewResultOut]:
    limit, offset = _window(page, limit)
    rows, total = list_results_page(
        candidate_id=candidate_id,
        vacancy_id=vacancy_id,
        status=status,
        offset=offset,
        limit=limit,
    )
    return Page[InterviewResultOut](
        data=[InterviewResultOut.model_validate(row.model_dump()) for row in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/vacancies/{vacancy_id}/statistics", response_model=VacancyStatisticsOut)
def read_vacancy_statistics(vacancy_id: int) -> VacancyStatisticsOut:
    if get_vacancy(vacancy_id) is None:
        raise HTTPException(status_code=404, detail="Vacancy not found")
    return VacancyStatisticsOut.model_validate(vacancy_statistics(vacancy_id).model_dump())
