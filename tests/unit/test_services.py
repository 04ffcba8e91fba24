"""Tests for per-chat locks and the typing indicator."""
from __future__ import annotations

import threading
import time

from services import KeyedLocks, typing_signal


def test_same_key_runs_one_at_a_time():
    locks = KeyedLocks()
    active = []
    overlaps = []

    def worker():
        with locks.hold("chat-1"):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert overlaps == []
    assert len(locks) == 0


def test_different_keys_do_not_block():
    locks = KeyedLocks()
    with locks.hold("a"):
        entered = threading.Event()

        def other():
            with locks.hold("b"):
                entered.set()

        thread = threading.Thread(target=other)
        thread.start()
        assert entered.wait(1.0)
        thread.join()
        assert len(locks) == 1


def test_typing_signal_sends_immediately_and_repeats():
    calls = []
    with typing_signal(lambda: calls.append(time.monotonic()), interval_s=0.02):
        time.sleep(0.1)
    count = len(calls)
    time.sleep(0.05)
    assert count >= 2
    assert len(calls) == count


def test_typing_signal_survives_send_errors():
    def boom():
        raise RuntimeError("transport down")

    with typing_signal(boom, interval_s=0.01):
        value = "work finished"
    assert value == "work finished"
