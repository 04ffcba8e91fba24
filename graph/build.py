"""Answer graph assembly and execution."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from langgraph.graph import END, StateGraph

from interview_evaluation import EvaluationEngine
from interview_results import InterviewResultTracker
from interview_session import SessionStateMachine
from llm_gateway import CompletionGateway
from observability.logger import log_event
from observability.tracing import span
from prompt_compiler import PromptCompiler
from storage.vacancies import Vacancy, get_vacancy
from turn_store import TurnStore

from .nodes import commit, compose, evaluate, generate
from .state import AnswerState


@dataclass
class PipelineDeps:
    machine: SessionStateMachine
    turns: TurnStore
    compiler: PromptCompiler
    gateway: CompletionGateway
    engine: EvaluationEngine
    results: InterviewResultTracker
    context_window: int = 10
    vacancy_lookup: Callable[[int], Optional[Vacancy]] = get_vacancy


def _route_after_commit(state: AnswerState) -> str:
    return "evaluate" if state.get("complete") else "end"


def build_answer_graph(deps: PipelineDeps) -> Any:
    """Compile compose -> generate -> commit -> (evaluate)."""

    graph = StateGraph(AnswerState)
    graph.add_node(
        "compose",
        compose.build(
            deps.compiler,
            deps.turns,
            deps.vacancy_lookup,
            context_window=deps.context_window,
            question_target=deps.machine.question_target,
        ),
    )
    graph.add_node("generate", generate.build(deps.gateway))
    graph.add_node("commit", commit.build(deps.machine))
    graph.add_node("evaluate", evaluate.build(deps.machine, deps.engine, deps.results, deps.turns))
    graph.set_entry_point("compose")
    graph.add_edge("compose", "generate")
    graph.add_edge("generate", "commit")
    graph.add_conditional_edges("commit", _route_after_commit, {"evaluate": "evaluate", "end": END})
    graph.add_edge("evaluate", END)
    return graph.compile()


class AnswerPipeline:
    """Run one candidate answer through the graph.

    Nothing is written before the gateway replies: a ``GenerationError``
    leaves the turn log, the counter and the interview result untouched.
    """

    def __init__(self, deps: PipelineDeps) -> None:
        self._deps = deps
        self._graph = build_answer_graph(deps)

    def run(self, chat_id: str, answer: str) -> AnswerState:
        session = self._deps.machine.require_interviewing(chat_id)
        initial: AnswerState = {
            "chat_id": chat_id,
            "candidate_id": session.candidate_id,
            "vacancy_id": session.current_vacancy_id,
            "question_count": session.question_count,
            "answer": answer,
        }
        log_event("step.start", chat_id, stage=session.stage, question_count=session.question_count)
        with span(chat_id, "answer_graph"):
            result = self._graph.invoke(initial)
        log_event(
            "step.end",
            chat_id,
            question_count=result.get("question_count"),
            outcome="evaluated" if result.get("evaluation") is not None else "replied",
        )
        return result


__all__ = ["AnswerPipeline", "PipelineDeps", "build_answer_graph"]
