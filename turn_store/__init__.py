"""Conversation turn log."""
from .store import SENDER_LABELS, TurnStore, render_turns

__all__ = ["SENDER_LABELS", "TurnStore", "render_turns"]
