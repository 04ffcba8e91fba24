from __future__ import annotations  # Evaluation payload parsed from model output

import math
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Recommendation = Literal["proceed", "reject", "clarify"]

RECOMMENDATIONS = ("proceed", "reject", "clarify")
DEFAULT_FEEDBACK = "Evaluation completed."


def default_analysis() -> Dict[str, Any]:
    return {"keySkills": [], "experienceLevel": "middle", "matchingResults": []}


def clamp_score(value: Any) -> int:  # Coerce anything to an integer in [0, 100]
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        try:
            value = float(text)
        except ValueError:
            return 0
    if isinstance(value, int):
        return max(0, min(100, value))
    if not isinstance(value, float):
        return 0
    number = value
    if math.isnan(number):
        return 0
    number = max(0.0, min(100.0, number))
    return int(math.floor(number + 0.5))


def string_list(value: Any) -> List[str]:  # Keep non-empty scalar items of a list, anything else becomes []
    if not isinstance(value, list):
        return []
    items: List[str] = []
    for item in value:
        if isinstance(item, bool) or item is None:
            continue
        if isinstance(item, (str, int, float)):
            text = str(item).strip()
            if text:
                items.append(text)
    return items


class EvaluationDraft(BaseModel):  # Clamped evaluation before it is stored
    model_config = ConfigDict(populate_by_name=True)

    overall_score: int = Field(default=0, alias="overallScore")
    technical_score: int = Field(default=0, alias="technicalScore")
    communication_score: int = Field(default=0, alias="communicationScore")
    problem_solving_score: int = Field(default=0, alias="problemSolvingScore")
    strengths: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    contradictions: List[str] = Field(default_factory=list)
    recommendation: Recommendation = "clarify"
    feedback: str = DEFAULT_FEEDBACK
    analysis_data: Dict[str, Any] = Field(default_factory=default_analysis, alias="analysisData")

    @field_validator(
        "overall_score",
        "technical_score",
        "communication_score",
        "problem_solving_score",
        mode="before",
    )
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return clamp_score(value)

    @field_validator("strengths", "gaps", "contradictions", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return string_list(value)

    @field_validator("recommendation", mode="before")
    @classmethod
    def _recommendation(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in RECOMMENDATIONS:
            return value.strip().lower()
        return "clarify"

    @field_validator("feedback", mode="before")
    @classmethod
    def _feedback(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_FEEDBACK

    @field_validator("analysis_data", mode="before")
    @classmethod
    def _analysis(cls, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict):
            return default_analysis()
        merged = default_analysis()
        merged.update(value)
        return merged

    @classmethod
    def neutral(cls) -> "EvaluationDraft":  # Used when the model output cannot be parsed at all
        return cls(
            overall_score=50,
            technical_score=50,
            communication_score=50,
            problem_solving_score=50,
            strengths=["Took part in the interview"],
            gaps=["Further analysis required"],
            contradictions=[],
            recommendation="clarify",
            feedback="Thank you for the interview. Your answers will be reviewed by our HR team.",
        )


__all__ = [
    "DEFAULT_FEEDBACK",
    "EvaluationDraft",
    "RECOMMENDATIONS",
    "Recommendation",
    "clamp_score",
    "default_analysis",
    "string_list",
]
