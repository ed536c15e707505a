"""Tests for the public teacher directory."""
from fastapi import status

from app.models import UserType


def test_list_public_teachers(client, teacher, make_user):
    make_user(UserType.teacher, is_profile_public=False)
    make_user(UserType.student, is_profile_public=True)

    data = client.get("/teachers").json()["data"]
    assert [t["id"] for t in data["teachers"]] == [teacher.id]
    assert data["total"] == 1
    assert data["hasMore"] is False


def test_search_teachers(client, teacher, make_user):
    make_user(UserType.teacher, first_name="Alan", last_name="Turing", is_profile_public=True)
    data = client.get("/teachers/search?q=hop").json()["data"]
    assert [t["id"] for t in data] == [teacher.id]
    assert client.get("/teachers/search?q=").json()["data"] == []


def test_profile_for_anonymous_viewer(client, teacher, student, follow, make_guide):
    follow(student, teacher)
    make_guide(teacher, published=True)
    make_guide(teacher, published=False)

    data = client.get(f"/teachers/{teacher.id}").json()["data"]
    assert data["teacher"]["guideCount"] == 1
    assert data["teacher"]["studentCount"] == 1
    assert data["guides"] == []
    assert data["isSelf"] is False
    assert data["hasRelationship"] is False


def test_profile_for_follower_and_self(client, teacher, student, follow, make_guide, auth_headers):
    follow(student, teacher)
    published = make_guide(teacher, published=True)
    make_guide(teacher, published=False)

    as_follower = client.get(f"/teachers/{teacher.id}", headers=auth_headers(student)).json()["data"]
    assert as_follower["hasRelationship"] is True
    assert [g["id"] for g in as_follower["guides"]] == [published.id]

    as_self = client.get(f"/teachers/{teacher.id}", headers=auth_headers(teacher)).json()["data"]
    assert as_self["isSelf"] is True
    assert len(as_self["guides"]) == 2
    assert as_self["teacher"]["guideCount"] == 2


def test_profile_errors(client, student):
    assert client.get("/teachers/no-such-id").status_code == status.HTTP_404_NOT_FOUND
    response = client.get(f"/teachers/{student.id}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "This user is not a teacher"
