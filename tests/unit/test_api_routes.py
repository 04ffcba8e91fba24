"""Tests for the read-only admin API."""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import router
from interview_results import InterviewResultTracker
from storage.evaluations import upsert_evaluation
from turn_store import TurnStore


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _evaluation(candidate_id, vacancy_id, score, recommendation="proceed"):
    return upsert_evaluation(
        candidate_id=candidate_id,
        vacancy_id=vacancy_id,
        overall_score=score,
        technical_score=score,
        communication_score=score,
        problem_solving_score=score,
        strengths=["SQL"],
        gaps=[],
        contradictions=[],
        recommendation=recommendation,
        feedback="ok",
        analysis_data={"keySkills": ["SQL"]},
    )


def test_turns_are_paginated(client, make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    turns = TurnStore()
    for idx in range(5):
        turns.append(candidate.id, vacancy_id, "candidate" if idx % 2 == 0 else "assistant", f"m{idx}")

    response = client.get("/api/admin/turns", params={"candidateId": candidate.id, "page": 2, "limit": 2})

    assert response.status_code == 200
    body = response.json()
    assert [item["content"] for item in body["data"]] == ["m2", "m3"]
    assert body["pagination"] == {
        "page": 2,
        "limit": 2,
        "total": 5,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": True,
    }
    assert body["data"][0]["candidateId"] == candidate.id


def test_turns_listing_includes_cleared_history(client, make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    turns = TurnStore()
    turns.append(candidate.id, vacancy_id, "candidate", "before reset")
    turns.clear(candidate.id)

    body = client.get("/api/admin/turns", params={"sender": "candidate"}).json()

    assert body["pagination"]["total"] == 1


def test_limit_is_capped(client):
    body = client.get("/api/admin/turns", params={"limit": 500}).json()
    assert body["pagination"]["limit"] == 100
    assert body["pagination"]["totalPages"] == 0
    assert body["pagination"]["hasNext"] is False


def test_evaluations_filter_by_score(client, make_candidate, make_vacancy):
    vacancy_id = make_vacancy()
    _evaluation(make_candidate("a").id, vacancy_id, 40, "reject")
    _evaluation(make_candidate("b").id, vacancy_id, 65, "clarify")
    _evaluation(make_candidate("c").id, vacancy_id, 90)

    body = client.get("/api/admin/evaluations", params={"minScore": 50, "maxScore": 80}).json()

    assert [item["overallScore"] for item in body["data"]] == [65]
    assert body["data"][0]["analysisData"] == {"keySkills": ["SQL"]}
    assert body["data"][0]["problemSolvingScore"] == 65


def test_evaluations_reject_inverted_range(client):
    response = client.get("/api/admin/evaluations", params={"minScore": 80, "maxScore": 20})
    assert response.status_code == 422


def test_read_evaluation(client, make_candidate, make_vacancy):
    record = _evaluation(make_candidate().id, make_vacancy(), 77)

    assert client.get(f"/api/admin/evaluations/{record.id}").json()["overallScore"] == 77
    assert client.get("/api/admin/evaluations/9999").status_code == 404


def test_interview_results_keep_nulls(client, make_candidate, make_vacancy):
    candidate = make_candidate()
    vacancy_id = make_vacancy()
    InterviewResultTracker().start_interview(candidate.id, vacancy_id)

    body = client.get("/api/admin/interview-results", params={"status": "in_progress"}).json()

    item = body["data"][0]
    assert item["status"] == "in_progress"
    assert item["evaluationId"] is None
    assert item["durationMinutes"] is None
    assert item["followUpRequired"] is False
    assert client.get("/api/admin/interview-results", params={"status": "completed"}).json()["data"] == []


def test_interview_results_reject_unknown_status(client):
    assert client.get("/api/admin/interview-results", params={"status": "paused"}).status_code == 422


def test_vacancy_statistics(client, make_candidate, make_vacancy):
    vacancy_id = make_vacancy()
    tracker = InterviewResultTracker()
    tracker.start_interview(make_candidate().id, vacancy_id)

    body = client.get(f"/api/admin/vacancies/{vacancy_id}/statistics").json()

    assert body["vacancyId"] == vacancy_id
    assert body["totalInterviews"] == 1
    assert body["inProgress"] == 1
    assert client.get("/api/admin/vacancies/999/statistics").status_code == 404
