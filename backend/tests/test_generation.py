"""Tests for study guide generation from uploaded material."""
import pytest
from fastapi import status

from app.errors import UpstreamError
from app.models import GuideFormat, StudyGuide
from app.services.generation import REQUIRED_FIELDS_MESSAGE, build_study_guide_prompt, combine_contents

FIELDS = {
    "studyGuideName": "Forces Review",
    "subject": "Physics",
    "gradeLevel": "10th Grade",
    "format": "flashcards",
    "topicFocus": "Newton's laws",
    "difficultyLevel": "beginner",
    "additionalInstructions": "Keep answers short",
}

FILES = [
    ("files", ("forces.txt", b"Force equals mass times acceleration.", "text/plain")),
    ("files", ("friction.txt", b"Friction opposes motion.", "text/plain")),
]

GENERATED = "Q: What is force? A: Mass times acceleration."


def test_prompt_includes_format_and_difficulty_guidance():
    prompt = build_study_guide_prompt(
        "--- notes.txt ---\nCells divide.",
        "Biology",
        "9th Grade",
        GuideFormat.quiz,
        topic_focus="Mitosis",
        difficulty_level="Advanced",
    )
    assert "SUBJECT: Biology" in prompt
    assert "TOPIC FOCUS: Mitosis" in prompt
    assert "answer key" in prompt
    assert "critical thinking" in prompt
    assert "STYLE REQUIREMENTS" not in prompt
    assert "--- notes.txt ---\nCells divide." in prompt


def test_combine_contents_labels_each_file():
    combined = combine_contents([
        {"name": "a.txt", "content": "First"},
        {"name": "b.txt", "content": "Second"},
    ])
    assert combined == "--- a.txt ---\nFirst\n\n--- b.txt ---\nSecond"


def test_generate_saves_unpublished_guide(client, db_session, completion_client, teacher, auth_headers):
    completion_client.reply = GENERATED

    response = client.post("/generate-study-guide", data=FIELDS, files=FILES, headers=auth_headers(teacher))
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["message"] == "Study guide generated successfully"
    data = body["data"]
    assert data["title"] == "Forces Review"
    assert data["format"] == "flashcards"
    assert data["content"] == GENERATED
    assert data["file_count"] == 2
    assert data["is_published"] is False
    assert data["additional_instructions"] == "Keep answers short"
    assert data["studyGuideUrl"] == f"/study-guide/{data['id']}"

    call = completion_client.calls[0]
    assert call["max_tokens"] == 4000
    assert call["temperature"] == 0.7
    assert "--- forces.txt ---\nForce equals mass times acceleration." in call["prompt"]
    assert "--- friction.txt ---" in call["prompt"]
    assert 'Format as "Q: [question] A: [answer]"' in call["prompt"]

    guide = db_session.query(StudyGuide).one()
    assert guide.user_id == teacher.id


def test_generate_requires_identity(client):
    response = client.post("/generate-study-guide", data=FIELDS, files=FILES)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_generate_requires_files(client, completion_client, student, auth_headers):
    response = client.post("/generate-study-guide", data=FIELDS, headers=auth_headers(student))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "error": "No files provided"}
    assert completion_client.calls == []


@pytest.mark.parametrize("field", ["studyGuideName", "subject", "gradeLevel", "format"])
def test_generate_requires_fields(client, db_session, completion_client, student, auth_headers, field):
    data = {**FIELDS, field: "  "}
    response = client.post("/generate-study-guide", data=data, files=FILES, headers=auth_headers(student))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == REQUIRED_FIELDS_MESSAGE
    assert completion_client.calls == []
    assert db_session.query(StudyGuide).count() == 0


def test_generate_rejects_unknown_format(client, completion_client, student, auth_headers):
    data = {**FIELDS, "format": "poster"}
    response = client.post("/generate-study-guide", data=data, files=FILES, headers=auth_headers(student))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert completion_client.calls == []


def test_generate_fails_when_a_file_cannot_be_read(client, db_session, completion_client, student, auth_headers):
    files = FILES + [("files", ("broken.pdf", b"this is not a pdf", "application/pdf"))]
    response = client.post("/generate-study-guide", data=FIELDS, files=files, headers=auth_headers(student))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert "broken.pdf" in response.json()["error"]
    assert completion_client.calls == []
    assert db_session.query(StudyGuide).count() == 0


def test_generate_completion_failure_saves_nothing(client, db_session, completion_client, student, auth_headers):
    completion_client.error = UpstreamError("Failed to generate study guide")
    response = client.post("/generate-study-guide", data=FIELDS, files=FILES, headers=auth_headers(student))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "error": "Failed to generate study guide"}
    assert db_session.query(StudyGuide).count() == 0
