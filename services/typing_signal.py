"""Background "typing..." indicator while slow work runs."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


@contextmanager
def typing_signal(send: Callable[[], None], interval_s: float = 4.0) -> Iterator[None]:
    """Call ``send`` now and every ``interval_s`` seconds until the block exits."""

    stop = threading.Event()

    def _send() -> None:
        try:
            send()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Typing signal failed: %s", exc)

    def _loop() -> None:
        while not stop.wait(interval_s):
            _send()

    _send()
    worker = threading.Thread(target=_loop, name="typing-signal", daemon=True)
    worker.start()
    try:
        yield
    finally:
        stop.set()
        worker.join(timeout=interval_s + 1.0)


__all__ = ["typing_signal"]
