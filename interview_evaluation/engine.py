from __future__ import annotations  # One-shot interview evaluation at completion

import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from langchain_core.runnables import Runnable, RunnableLambda
from pydantic import BaseModel, ValidationError

from interview_results import HrNotes
from interview_session import VacancyNotFound
from llm_gateway import CompletionGateway, runnable
from observability import log_event, span
from output_normalizer import Fail, parse_json_object
from prompt_compiler import EVALUATION, PromptCompiler
from storage.evaluations import EvaluationRecord, upsert_evaluation
from storage.vacancies import Vacancy, get_vacancy
from turn_store import TurnStore

from .feedback import hr_notes_for, render_candidate_feedback
from .models import EvaluationDraft


logger = logging.getLogger(__name__)


class EvaluationOutcome(BaseModel):  # Stored evaluation plus the message shown to the candidate
    evaluation: EvaluationRecord
    feedback: str
    used_fallback: bool = False

    def hr_notes(self) -> HrNotes:
        record = self.evaluation
        return hr_notes_for(
            overall_score=record.overall_score,
            technical_score=record.technical_score,
            communication_score=record.communication_score,
            recommendation=record.recommendation,
            strengths=record.strengths,
            gaps=record.gaps,
        )


def parse_evaluation(raw: Optional[str]) -> Tuple[EvaluationDraft, bool]:  # Draft and whether the neutral fallback was used
    parsed = parse_json_object(raw)
    if isinstance(parsed, Fail):
        logger.warning("Evaluation output not parseable, using neutral fallback: %s", parsed.reason)
        return EvaluationDraft.neutral(), True
    try:
        return EvaluationDraft.model_validate(parsed.value), False
    except ValidationError as exc:
        logger.warning("Evaluation output failed validation, using neutral fallback: %s", exc)
        return EvaluationDraft.neutral(), True


def evaluation_variables(vacancy: Vacancy, transcript: str) -> Dict[str, Any]:
    weights = vacancy.evaluation_weights
    return {
        "vacancy_title": vacancy.title,
        "vacancy_description": vacancy.description,
        "vacancy_requirements": json.dumps(vacancy.requirements, indent=2, ensure_ascii=False),
        "weight_technical": weights.technical_skills,
        "weight_communication": weights.communication,
        "weight_problem_solving": weights.problem_solving,
        "conversation": transcript,
    }


class EvaluationEngine:  # Renders the evaluation prompt, calls the gateway once, stores the clamped result
    def __init__(
        self,
        gateway: CompletionGateway,
        compiler: PromptCompiler,
        turns: TurnStore,
        *,
        vacancy_lookup: Callable[[int], Optional[Vacancy]] = get_vacancy,
    ) -> None:
        self._compiler = compiler
        self._turns = turns
        self._vacancy_lookup = vacancy_lookup
        self._chain: Runnable = (
            RunnableLambda(self._render)
            | runnable(gateway)
            | RunnableLambda(parse_evaluation)
        )

    def _render(self, payload: Dict[str, Any]) -> str:
        return self._compiler.render(EVALUATION, payload)

    def evaluate(self, candidate_id: int, vacancy_id: int) -> EvaluationOutcome:
        vacancy = self._vacancy_lookup(vacancy_id)
        if vacancy is None:
            raise VacancyNotFound(f"Vacancy {vacancy_id} is not available")
        transcript = self._turns.transcript(candidate_id, vacancy_id)
        session_key = f"{candidate_id}:{vacancy_id}"
        with span(session_key, "evaluation"):
            draft, used_fallback = self._chain.invoke(evaluation_variables(vacancy, transcript))
        record = upsert_evaluation(
            candidate_id=candidate_id,
            vacancy_id=vacancy_id,
            **draft.model_dump(by_alias=False),
        )
        feedback = render_candidate_feedback(
            strengths=record.strengths,
            gaps=record.gaps,
            feedback=record.feedback,
            recommendation=record.recommendation,
        )
        log_event(
            "evaluation.stored",
            session_key,
            evaluation_id=record.id,
            overall=record.overall_score,
            recommendation=record.recommendation,
            fallback=used_fallback,
        )
        return EvaluationOutcome(evaluation=record, feedback=feedback, used_fallback=used_fallback)


__all__ = ["EvaluationEngine", "EvaluationOutcome", "evaluation_variables", "parse_evaluation"]
