"""Append-only conversation log scoped by candidate and vacancy."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from storage.turns import Sender, Turn, TurnKind, insert_exchange, insert_reset, insert_turn, list_effective_turns

logger = logging.getLogger(__name__)

SENDER_LABELS: Dict[str, str] = {"candidate": "Candidate", "assistant": "Interviewer"}


def render_turns(turns: Sequence[Turn]) -> str:
    """Render turns as ``Candidate: ...`` / ``Interviewer: ...`` lines separated by blank lines."""

    return "\n\n".join(f"{SENDER_LABELS[turn.sender]}: {turn.content}" for turn in turns)


class TurnStore:
    """Turn log facade.

    Turns are never updated or deleted. ``clear`` writes a reset marker so
    earlier turns drop out of :meth:`history` and :meth:`context_window`
    while remaining available to the admin listing.
    """

    def append(
        self,
        candidate_id: int,
        vacancy_id: int,
        sender: Sender,
        content: str,
        *,
        kind: TurnKind = "text",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Turn:
        return insert_turn(
            candidate_id=candidate_id,
            vacancy_id=vacancy_id,
            sender=sender,
            kind=kind,
            content=content,
            metadata=metadata or {},
        )

    def append_exchange(
        self, candidate_id: int, vacancy_id: int, answer: str, reply: str, *, kind: TurnKind = "text"
    ) -> Tuple[Turn, Turn]:
        return insert_exchange(candidate_id, vacancy_id, answer, reply, kind=kind)

    def history(self, candidate_id: int, vacancy_id: int) -> List[Turn]:
        return list_effective_turns(candidate_id, vacancy_id)

    def recent(self, candidate_id: int, vacancy_id: int, limit: int) -> List[Turn]:
        if limit <= 0:
            return []
        return list_effective_turns(candidate_id, vacancy_id, limit=limit)

    def context_window(self, candidate_id: int, vacancy_id: int, limit: int) -> str:
        return render_turns(self.recent(candidate_id, vacancy_id, limit))

    def transcript(self, candidate_id: int, vacancy_id: int) -> str:
        return render_turns(self.history(candidate_id, vacancy_id))

    def clear(self, candidate_id: int, vacancy_id: Optional[int] = None) -> None:
        insert_reset(candidate_id, vacancy_id)
        logger.info("Turn history cleared candidate=%s vacancy=%s", candidate_id, vacancy_id or "*")
