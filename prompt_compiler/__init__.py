"""Prompt template storage and rendering."""
from .compiler import PromptCompiler, TemplateNotFound, substitute
from .context import vacancy_context
from .templates import CV_ANALYSIS, DEFAULT_TEMPLATES, EVALUATION, INTERVIEW_CHAT, RESUME_ANALYSIS

__all__ = [
    "CV_ANALYSIS",
    "DEFAULT_TEMPLATES",
    "EVALUATION",
    "INTERVIEW_CHAT",
    "RESUME_ANALYSIS",
    "PromptCompiler",
    "TemplateNotFound",
    "substitute",
    "vacancy_context",
]
