from .engine import EvaluationEngine, EvaluationOutcome, evaluation_variables, parse_evaluation
from .feedback import CLOSING_LINES, NEXT_STEPS, hr_notes_for, render_candidate_feedback
from .models import DEFAULT_FEEDBACK, EvaluationDraft, RECOMMENDATIONS, clamp_score, string_list

__all__ = [
    "CLOSING_LINES",
    "DEFAULT_FEEDBACK",
    "EvaluationDraft",
    "EvaluationEngine",
    "EvaluationOutcome",
    "NEXT_STEPS",
    "RECOMMENDATIONS",
    "clamp_score",
    "evaluation_variables",
    "hr_notes_for",
    "parse_evaluation",
    "render_candidate_feedback",
    "string_list",
]
