"""Tests for the append-only turn log."""
from __future__ import annotations

import sqlite3

import pytest

import storage.turns
from storage.turns import list_turns_page
from turn_store import TurnStore


def _seed(store, candidate_id, vacancy_id, count, prefix="q"):
    for index in range(count):
        store.append(candidate_id, vacancy_id, "assistant", f"{prefix}{index}")
        store.append(candidate_id, vacancy_id, "candidate", f"a{index}")


def test_context_window_renders_labels_in_order(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    store = TurnStore()
    store.append(candidate.id, vacancy_id, "assistant", "Tell me about yourself.")
    store.append(candidate.id, vacancy_id, "candidate", "I write Python.")

    window = store.context_window(candidate.id, vacancy_id, 10)

    assert window == "Interviewer: Tell me about yourself.\n\nCandidate: I write Python."


def test_context_window_keeps_most_recent_turns(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    store = TurnStore()
    _seed(store, candidate.id, vacancy_id, 3)

    recent = store.recent(candidate.id, vacancy_id, 3)

    assert [turn.content for turn in recent] == ["a1", "q2", "a2"]
    assert store.recent(candidate.id, vacancy_id, 0) == []


def test_turns_are_scoped_by_vacancy(make_candidate, make_vacancy):
    candidate = make_candidate()
    first, second = make_vacancy("First"), make_vacancy("Second")
    store = TurnStore()
    store.append(candidate.id, first, "candidate", "about first")
    store.append(candidate.id, second, "candidate", "about second")

    assert store.context_window(candidate.id, second, 10) == "Candidate: about second"


def test_clear_hides_turns_without_deleting(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    store = TurnStore()
    _seed(store, candidate.id, vacancy_id, 2)

    store.clear(candidate.id, vacancy_id)
    store.append(candidate.id, vacancy_id, "candidate", "fresh start")

    assert [turn.content for turn in store.history(candidate.id, vacancy_id)] == ["fresh start"]
    rows, total = list_turns_page(candidate_id=candidate.id, limit=100)
    assert total == 5
    assert rows[0].content == "q0"


def test_clear_for_one_vacancy_keeps_other_vacancy(make_candidate, make_vacancy):
    candidate = make_candidate()
    first, second = make_vacancy("First"), make_vacancy("Second")
    store = TurnStore()
    store.append(candidate.id, first, "candidate", "kept")
    store.append(candidate.id, second, "candidate", "hidden")

    store.clear(candidate.id, second)

    assert [turn.content for turn in store.history(candidate.id, first)] == ["kept"]
    assert store.history(candidate.id, second) == []


def test_clear_all_vacancies(make_candidate, make_vacancy):
    candidate = make_candidate()
    other = make_candidate("tg-2")
    first, second = make_vacancy("First"), make_vacancy("Second")
    store = TurnStore()
    store.append(candidate.id, first, "candidate", "one")
    store.append(candidate.id, second, "candidate", "two")
    store.append(other.id, first, "candidate", "other candidate")

    store.clear(candidate.id)

    assert store.history(candidate.id, first) == []
    assert store.history(candidate.id, second) == []
    assert [turn.content for turn in store.history(other.id, first)] == ["other candidate"]


def test_document_turn_metadata_round_trips(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    turn = TurnStore().append(
        candidate.id,
        vacancy_id,
        "candidate",
        "Uploaded résumé: cv.pdf",
        kind="document",
        metadata={"size": 12},
    )

    stored = TurnStore().history(candidate.id, vacancy_id)[0]
    assert stored.id == turn.id
    assert stored.kind == "document"
    assert stored.metadata == {"size": 12}
    assert stored.created_at == turn.created_at


def test_append_exchange_writes_answer_then_reply(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()

    answer, reply = TurnStore().append_exchange(candidate.id, vacancy_id, "I use pytest", "What about fixtures?")

    assert (answer.sender, reply.sender) == ("candidate", "assistant")
    assert reply.id == answer.id + 1
    history = TurnStore().history(candidate.id, vacancy_id)
    assert [turn.content for turn in history] == ["I use pytest", "What about fixtures?"]


def test_append_exchange_is_all_or_nothing(make_candidate, make_vacancy, monkeypatch):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    real_insert = storage.turns._insert
    calls = []

    def insert_then_fail(cur, payload, timestamp):
        calls.append(payload.sender)
        if payload.sender == "assistant":
            raise sqlite3.OperationalError("disk I/O error")
        return real_insert(cur, payload, timestamp)

    monkeypatch.setattr(storage.turns, "_insert", insert_then_fail)

    with pytest.raises(sqlite3.OperationalError):
        TurnStore().append_exchange(candidate.id, vacancy_id, "answer", "reply")

    assert calls == ["candidate", "assistant"]
    _, total = list_turns_page(candidate_id=candidate.id)
    assert total == 0
