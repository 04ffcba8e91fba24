"""Concurrency helpers shared by the chat front end."""
from .keyed_locks import KeyedLocks
from .typing_signal import typing_signal

__all__ = ["KeyedLocks", "typing_signal"]
