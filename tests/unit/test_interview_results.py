"""Tests for the interview result tracker."""
from __future__ import annotations

import datetime as dt

import pytest

from interview_results import HrNotes, InterviewResultTracker, completion_percentage
from storage.results import list_results_page


@pytest.mark.parametrize(
    "answered,target,expected",
    [(0, 5, 0), (1, 5, 20), (3, 5, 60), (5, 5, 100), (7, 5, 100), (1, 3, 33), (2, 3, 67), (1, 8, 13), (0, 0, 100)],
)
def test_completion_percentage(answered, target, expected):
    assert completion_percentage(answered, target) == expected


def _later(minutes: int):
    return lambda: dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=minutes)


def test_start_creates_in_progress_row(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker(question_target=5)

    record = tracker.start_interview(candidate.id, vacancy_id)

    assert record.status == "in_progress"
    assert record.total_questions == 5
    assert record.total_answers == 0
    assert record.completion_percentage == 0


def test_restart_while_in_progress_reopens_same_row(make_candidate, make_vacancy, monkeypatch):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker()
    monkeypatch.setattr("storage.results.utcnow", lambda: "2024-01-01T10:00:00+00:00")
    first = tracker.start_interview(candidate.id, vacancy_id)
    tracker.update_progress(candidate.id, vacancy_id, 2)

    monkeypatch.setattr("storage.results.utcnow", lambda: "2024-01-01T11:00:00+00:00")
    second = tracker.start_interview(candidate.id, vacancy_id)

    assert second.id == first.id
    assert second.total_answers == 0
    assert second.completion_percentage == 0
    assert second.status == "in_progress"
    assert second.started_at == "2024-01-01T11:00:00+00:00"
    _, total = list_results_page()
    assert total == 1


def test_update_progress_tracks_percentage(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker(question_target=5)
    tracker.start_interview(candidate.id, vacancy_id)

    record = tracker.update_progress(candidate.id, vacancy_id, 3)

    assert record.total_answers == 3
    assert record.completion_percentage == 60


def test_update_without_row_is_a_noop(make_candidate, make_vacancy):
    candidate = make_candidate()
    assert InterviewResultTracker().update_progress(candidate.id, make_vacancy(), 1) is None


def test_complete_records_outcome(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker(now=_later(30))
    tracker.start_interview(candidate.id, vacancy_id)
    tracker.update_progress(candidate.id, vacancy_id, 5)
    notes = HrNotes(
        technical_score=80,
        soft_skills_score=70,
        overall_impression="Overall Score: 78% - proceed",
        next_steps="Recommended for the next selection stage",
        follow_up_required=False,
        interviewer_notes="Strengths: SQL. Gaps: ",
    )

    record = tracker.complete_interview(
        candidate.id,
        vacancy_id,
        final_feedback="Thanks!",
        hr_notes=notes,
        session_data={"question_count": 5},
        conversation_length=10,
    )

    assert record.status == "completed"
    assert record.completion_percentage == 100
    assert record.duration_minutes == 30
    assert record.technical_assessment_score == 80
    assert record.soft_skills_assessment_score == 70
    assert record.follow_up_required is False
    assert record.final_feedback == "Thanks!"
    assert record.result_data["sessionData"] == {"question_count": 5}
    assert record.result_data["conversationLength"] == 10
    assert "completedAt" in record.result_data


def test_terminal_rows_are_not_modified(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker()
    tracker.start_interview(candidate.id, vacancy_id)
    completed = tracker.complete_interview(candidate.id, vacancy_id, final_feedback="first")

    assert tracker.complete_interview(candidate.id, vacancy_id, final_feedback="second").final_feedback == "first"
    assert tracker.update_progress(candidate.id, vacancy_id, 4).total_answers == completed.total_answers
    assert tracker.cancel_interview(candidate.id, vacancy_id, "late").status == "completed"


def test_cancel_marks_row(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker(now=_later(2))
    tracker.start_interview(candidate.id, vacancy_id)

    record = tracker.cancel_interview(candidate.id, vacancy_id, "user-initiated reset")

    assert record.status == "cancelled"
    assert record.interviewer_notes == "Interview cancelled: user-initiated reset"
    assert record.result_data["reason"] == "user-initiated reset"
    assert record.duration_minutes == 2


def test_restart_after_completion_reopens(make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker()
    first = tracker.start_interview(candidate.id, vacancy_id)
    tracker.complete_interview(candidate.id, vacancy_id, final_feedback="done")

    reopened = tracker.start_interview(candidate.id, vacancy_id)

    assert reopened.id == first.id
    assert reopened.status == "in_progress"
    assert reopened.final_feedback is None
    assert reopened.total_answers == 0


def test_statistics(make_candidate, make_vacancy):
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker(question_target=4)
    ada = make_candidate("tg-1")
    bob = make_candidate("tg-2", first_name="Bob")
    tracker.start_interview(ada.id, vacancy_id)
    tracker.update_progress(ada.id, vacancy_id, 4)
    tracker.complete_interview(ada.id, vacancy_id)
    tracker.start_interview(bob.id, vacancy_id)
    tracker.update_progress(bob.id, vacancy_id, 2)

    stats = tracker.statistics(vacancy_id)

    assert stats.total_interviews == 2
    assert stats.completed == 1
    assert stats.in_progress == 1
    assert stats.cancelled == 0
    assert stats.average_completion == pytest.approx(75.0)


def test_statistics_for_unknown_vacancy():
    stats = InterviewResultTracker().statistics(999)
    assert stats.total_interviews == 0
    assert stats.average_completion is None
