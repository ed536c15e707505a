"""Tests for flashcard progress."""
import pytest
from fastapi import status

from app.models import FlashcardProgress, FlashcardStatus


@pytest.fixture
def flashcard_guide(teacher, make_guide):
    return make_guide(teacher, published=True, content="Q: What is F? A: ma")


def test_progress_starts_empty(client, student, flashcard_guide, auth_headers):
    response = client.get(
        "/flashcard-progress", params={"studyGuideId": flashcard_guide.id}, headers=auth_headers(student)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"progress": {}}


def test_save_replaces_earlier_mark(client, db_session, student, flashcard_guide, auth_headers):
    headers = auth_headers(student)
    body = {"studyGuideId": flashcard_guide.id, "cardId": "card-1", "status": "difficult"}

    response = client.post("/flashcard-progress", json=body, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"cardId": "card-1", "status": "difficult"}

    client.post("/flashcard-progress", json={**body, "status": "mastered"}, headers=headers)
    client.post("/flashcard-progress", json={**body, "cardId": "card-2"}, headers=headers)

    progress = client.get(
        "/flashcard-progress", params={"studyGuideId": flashcard_guide.id}, headers=headers
    ).json()["data"]["progress"]
    assert progress == {"card-1": "mastered", "card-2": "difficult"}
    row = db_session.query(FlashcardProgress).filter_by(card_id="card-1").one()
    assert row.status == FlashcardStatus.mastered


def test_progress_is_per_learner(client, student, teacher, flashcard_guide, auth_headers):
    body = {"studyGuideId": flashcard_guide.id, "cardId": "card-1", "status": "mastered"}
    client.post("/flashcard-progress", json=body, headers=auth_headers(student))

    response = client.get(
        "/flashcard-progress", params={"studyGuideId": flashcard_guide.id}, headers=auth_headers(teacher)
    )
    assert response.json()["data"]["progress"] == {}


def test_reset_clears_progress(client, db_session, student, flashcard_guide, auth_headers):
    headers = auth_headers(student)
    for card in ("card-1", "card-2"):
        client.post(
            "/flashcard-progress",
            json={"studyGuideId": flashcard_guide.id, "cardId": card, "status": "mastered"},
            headers=headers,
        )

    response = client.delete("/flashcard-progress", params={"studyGuideId": flashcard_guide.id}, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == {"deleted": 2}
    assert db_session.query(FlashcardProgress).count() == 0


@pytest.mark.parametrize("missing", ["studyGuideId", "cardId", "status"])
def test_save_requires_fields(client, student, flashcard_guide, auth_headers, missing):
    body = {"studyGuideId": flashcard_guide.id, "cardId": "card-1", "status": "mastered"}
    del body[missing]
    response = client.post("/flashcard-progress", json=body, headers=auth_headers(student))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Study guide ID, card ID, and status are required"


def test_save_rejects_unknown_status(client, student, flashcard_guide, auth_headers):
    body = {"studyGuideId": flashcard_guide.id, "cardId": "card-1", "status": "skipped"}
    response = client.post("/flashcard-progress", json=body, headers=auth_headers(student))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == 'Status must be "mastered" or "difficult"'


def test_progress_needs_a_visible_guide(client, student, teacher, make_guide, auth_headers):
    draft = make_guide(teacher)
    headers = auth_headers(student)
    body = {"studyGuideId": draft.id, "cardId": "card-1", "status": "mastered"}

    assert client.post("/flashcard-progress", json=body, headers=headers).status_code == status.HTTP_404_NOT_FOUND
    response = client.get("/flashcard-progress", headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Study guide ID is required"


def test_progress_requires_identity(client, flashcard_guide):
    response = client.get("/flashcard-progress", params={"studyGuideId": flashcard_guide.id})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
