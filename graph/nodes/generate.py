"""Completion node; gateway errors propagate to the caller untouched."""
from __future__ import annotations

from typing import Any, Callable, Dict

from llm_gateway import CompletionGateway

from ..state import AnswerState


def build(gateway: CompletionGateway) -> Callable[[AnswerState], Dict[str, Any]]:
    def run(state: AnswerState) -> Dict[str, Any]:
        return {"raw_reply": gateway.generate(state["prompt"])}

    return run


__all__ = ["build"]
