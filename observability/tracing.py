"""Simple span helper for recording pipeline timings."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .logger import log_event


@contextmanager
def span(session_id: str, name: str, events: Optional[List[Dict[str, Any]]] = None) -> Iterator[None]:
    start = time.time()
    try:
        yield
    finally:
        elapsed_ms = int((time.time() - start) * 1000)
        if events is not None:
            events.append({"span": name, "ms": elapsed_ms})
        log_event("span", session_id, name=name, ms=elapsed_ms)


__all__ = ["span"]
