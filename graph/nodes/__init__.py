"""Node factories for the answer LangGraph."""
from . import commit, compose, evaluate, generate

__all__ = ["commit", "compose", "evaluate", "generate"]
