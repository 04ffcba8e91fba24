"""Tests for the per-chat session state machine."""
from __future__ import annotations

import sqlite3

import pytest

from interview_results import InterviewResultTracker
from interview_session import (
    InMemorySessionStore,
    InterviewAlreadyCompleted,
    NoActiveSession,
    SessionStateMachine,
    VacancyNotFound,
)
from storage.turns import list_turns_page
from storage.vacancies import set_vacancy_status
from turn_store import TurnStore


@pytest.fixture
def machine():
    return SessionStateMachine(
        InMemorySessionStore(),
        TurnStore(),
        InterviewResultTracker(question_target=3),
        question_target=3,
    )


def _interviewing(machine, make_candidate, make_vacancy, chat_id="chat-1"):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    machine.begin(chat_id, candidate.id)
    machine.select_vacancy(chat_id, vacancy_id)
    return candidate, vacancy_id


def test_unknown_chat_defaults_to_selecting(machine):
    state = machine.get("nobody")
    assert state.stage == "selecting_vacancy"
    assert state.question_count == 0
    assert state.current_vacancy_id is None


def test_select_vacancy_starts_interview(machine, make_candidate, make_vacancy):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)

    state = machine.get("chat-1")
    assert state.stage == "interviewing"
    assert state.current_vacancy_id == vacancy_id
    assert state.question_count == 0
    assert state.started_at is not None
    result = machine._results.get(candidate.id, vacancy_id)
    assert result.status == "in_progress"


def test_select_unknown_vacancy(machine, make_candidate):
    machine.begin("chat-1", make_candidate().id)
    with pytest.raises(VacancyNotFound):
        machine.select_vacancy("chat-1", 404)
    assert machine.get("chat-1").stage == "selecting_vacancy"


def test_select_inactive_vacancy(machine, make_candidate, make_vacancy):
    vacancy_id = make_vacancy()
    set_vacancy_status(vacancy_id, "inactive")
    machine.begin("chat-1", make_candidate().id)
    with pytest.raises(VacancyNotFound):
        machine.select_vacancy("chat-1", vacancy_id)


def test_select_without_candidate(machine, make_vacancy):
    with pytest.raises(NoActiveSession):
        machine.select_vacancy("chat-1", make_vacancy())


def test_answer_before_selection(machine, make_candidate):
    machine.begin("chat-1", make_candidate().id)
    with pytest.raises(NoActiveSession):
        machine.record_answer("chat-1", "hello")


def test_record_answer_counts_and_logs(machine, make_candidate, make_vacancy):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)

    state, turn = machine.record_answer("chat-1", "I like Python")

    assert state.question_count == 1
    assert turn.sender == "candidate"
    assert turn.vacancy_id == vacancy_id
    assert machine._results.get(candidate.id, vacancy_id).completion_percentage == 33


def test_completion_happens_once(machine, make_candidate, make_vacancy):
    _interviewing(machine, make_candidate, make_vacancy)
    for answer in ("a", "b"):
        machine.record_answer("chat-1", answer)
        assert machine.complete("chat-1") is False
    machine.record_answer("chat-1", "c")

    assert machine.is_complete("chat-1")
    assert machine.complete("chat-1") is True
    assert machine.complete("chat-1") is False
    assert machine.get("chat-1").stage == "completed"
    with pytest.raises(InterviewAlreadyCompleted):
        machine.record_answer("chat-1", "one more")
    assert machine.get("chat-1").question_count == 3


def test_reset_cancels_and_clears(machine, make_candidate, make_vacancy):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)
    machine.record_answer("chat-1", "first answer")

    machine.reset("chat-1")

    state = machine.get("chat-1")
    assert state.stage == "selecting_vacancy"
    assert state.question_count == 0
    assert machine._turns.history(candidate.id, vacancy_id) == []
    assert machine._results.get(candidate.id, vacancy_id).status == "cancelled"
    _, total = list_turns_page(candidate_id=candidate.id)
    assert total == 1


def test_reset_after_completion_keeps_result(machine, make_candidate, make_vacancy):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)
    for answer in ("a", "b", "c"):
        machine.record_answer("chat-1", answer)
    machine.complete("chat-1")
    machine._results.complete_interview(candidate.id, vacancy_id)

    machine.reset("chat-1")

    assert machine._results.get(candidate.id, vacancy_id).status == "completed"


def test_reset_without_state_uses_candidate(machine, make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    machine._turns.append(candidate.id, vacancy_id, "candidate", "stale")

    machine.reset("fresh-chat", candidate_id=candidate.id)

    assert machine._turns.history(candidate.id, vacancy_id) == []


def test_switching_vacancy_scopes_history(machine, make_candidate, make_vacancy):
    candidate, first_vacancy = _interviewing(machine, make_candidate, make_vacancy)
    machine.record_answer("chat-1", "about the first role")
    second_vacancy = make_vacancy("Data Engineer")

    state, _ = machine.select_vacancy("chat-1", second_vacancy)

    assert state.question_count == 0
    assert machine._turns.history(candidate.id, second_vacancy) == []
    assert [t.content for t in machine._turns.history(candidate.id, first_vacancy)] == ["about the first role"]


def test_reselecting_clears_previous_history(machine, make_candidate, make_vacancy):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)
    machine.record_answer("chat-1", "old")

    machine.select_vacancy("chat-1", vacancy_id)

    assert machine._turns.history(candidate.id, vacancy_id) == []
    assert machine._results.get(candidate.id, vacancy_id).total_answers == 0


def test_record_answer_with_reply_stores_both_turns(machine, make_candidate, make_vacancy):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)

    state, turn = machine.record_answer("chat-1", "I like Python", reply="Why Python?")

    assert state.question_count == 1
    assert turn.sender == "candidate"
    history = machine._turns.history(candidate.id, vacancy_id)
    assert [(t.sender, t.content) for t in history] == [("candidate", "I like Python"), ("assistant", "Why Python?")]


def test_failed_turn_write_leaves_counter_unchanged(machine, make_candidate, make_vacancy, monkeypatch):
    candidate, vacancy_id = _interviewing(machine, make_candidate, make_vacancy)

    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(machine._turns, "append_exchange", broken)

    with pytest.raises(sqlite3.OperationalError):
        machine.record_answer("chat-1", "answer", reply="reply")

    assert machine.get("chat-1").question_count == 0
    assert machine._results.get(candidate.id, vacancy_id).total_answers == 0
