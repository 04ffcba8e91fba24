"""Candidate and reviewer facing renderings of an evaluation."""
from __future__ import annotations

from typing import Dict, Sequence

from interview_results import HrNotes

CLOSING_LINES: Dict[str, str] = {
    "proceed": "We will review your application and contact you shortly to discuss the next steps.",
    "reject": "Unfortunately your profile is not a match for this position right now. Thank you for your interest in our company!",
    "clarify": "We need a few more details. An HR manager will contact you to arrange a follow-up interview.",
}

NEXT_STEPS: Dict[str, str] = {
    "proceed": "Recommended for the next selection stage",
    "reject": "Not recommended for further consideration",
    "clarify": "Additional interview required to clarify competencies",
}


def render_candidate_feedback(
    *,
    strengths: Sequence[str],
    gaps: Sequence[str],
    feedback: str,
    recommendation: str,
) -> str:
    lines = ["Interview results", ""]
    if strengths:
        lines.append("Your strengths:")
        lines.extend(f"• {item}" for item in strengths)
        lines.append("")
    if gaps:
        lines.append("Areas to develop:")
        lines.extend(f"• {item}" for item in gaps)
        lines.append("")
    lines.append(f"Feedback: {feedback}")
    closing = CLOSING_LINES.get(recommendation)
    if closing:
        lines.append("")
        lines.append(closing)
    return "\n".join(lines)


def hr_notes_for(
    *,
    overall_score: int,
    technical_score: int,
    communication_score: int,
    recommendation: str,
    strengths: Sequence[str],
    gaps: Sequence[str],
) -> HrNotes:
    return HrNotes(
        technical_score=technical_score,
        soft_skills_score=communication_score,
        overall_impression=f"Overall Score: {overall_score}% - {recommendation}",
        next_steps=NEXT_STEPS.get(recommendation, "Results will be reviewed by an HR specialist"),
        follow_up_required=recommendation == "clarify",
        interviewer_notes=f"Strengths: {', '.join(strengths)}. Gaps: {', '.join(gaps)}",
    )
