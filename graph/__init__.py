"""LangGraph pipeline for candidate answers."""
from .state import AnswerState
from .build import AnswerPipeline, PipelineDeps, build_answer_graph

__all__ = ["AnswerPipeline", "AnswerState", "PipelineDeps", "build_answer_graph"]
