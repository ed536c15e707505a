"""Tests for following teachers and the follow feed."""
from fastapi import status

from app.models import TeacherFollow, UserType


def test_follow_teacher(client, db_session, teacher, student, auth_headers):
    response = client.post("/follows", json={"teacherId": teacher.id}, headers=auth_headers(student))
    assert response.status_code == status.HTTP_201_CREATED
    follow = response.json()["data"]["follow"]
    assert follow["follower_id"] == student.id
    assert follow["teacher_id"] == teacher.id
    assert db_session.query(TeacherFollow).count() == 1


def test_follow_requires_identity(client, teacher):
    response = client.post("/follows", json={"teacherId": teacher.id})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["success"] is False


def test_follow_validation(client, teacher, student, make_user, auth_headers):
    headers = auth_headers(student)

    missing = client.post("/follows", json={}, headers=headers)
    assert missing.status_code == status.HTTP_400_BAD_REQUEST
    assert missing.json()["error"] == "Teacher ID is required"

    self_follow = client.post("/follows", json={"teacherId": student.id}, headers=headers)
    assert self_follow.status_code == status.HTTP_400_BAD_REQUEST

    unknown = client.post("/follows", json={"teacherId": "no-such-id"}, headers=headers)
    assert unknown.status_code == status.HTTP_404_NOT_FOUND

    other_student = make_user(UserType.student)
    not_teacher = client.post("/follows", json={"teacherId": other_student.id}, headers=headers)
    assert not_teacher.status_code == status.HTTP_400_BAD_REQUEST
    assert not_teacher.json()["error"] == "You can only follow teachers"

    private = make_user(UserType.teacher, is_profile_public=False)
    forbidden = client.post("/follows", json={"teacherId": private.id}, headers=headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN


def test_follow_twice_conflicts(client, db_session, teacher, student, auth_headers):
    headers = auth_headers(student)
    client.post("/follows", json={"teacherId": teacher.id}, headers=headers)
    response = client.post("/follows", json={"teacherId": teacher.id}, headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert db_session.query(TeacherFollow).count() == 1


def test_follow_status_and_unfollow(client, db_session, teacher, student, follow, auth_headers):
    follow(student, teacher)
    headers = auth_headers(student)

    status_resp = client.get(f"/follows/{teacher.id}", headers=headers)
    assert status_resp.json()["data"] == {"isFollowing": True}

    response = client.delete(f"/follows/{teacher.id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert db_session.query(TeacherFollow).count() == 0

    status_resp = client.get(f"/follows/{teacher.id}", headers=headers)
    assert status_resp.json()["data"] == {"isFollowing": False}


def test_unfollow_is_idempotent(client, teacher, student, auth_headers):
    response = client.delete(f"/follows/{teacher.id}", headers=auth_headers(student))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}


def test_follow_status_requires_identity(client, teacher):
    assert client.get(f"/follows/{teacher.id}").status_code == status.HTTP_401_UNAUTHORIZED


def test_list_following(client, teacher, student, follow, auth_headers):
    follow(student, teacher)
    response = client.get("/follows", headers=auth_headers(student))
    assert response.status_code == status.HTTP_200_OK
    items = response.json()["data"]
    assert len(items) == 1
    assert items[0]["teacher"]["id"] == teacher.id
    assert items[0]["teacher"]["is_profile_public"] is True


def test_feed_lists_published_guides_of_followed_teachers(
    client, teacher, student, make_user, follow, make_guide, auth_headers
):
    follow(student, teacher)
    published = make_guide(teacher, title="Cells", published=True)
    make_guide(teacher, title="Draft", published=False)
    stranger = make_user(UserType.teacher, is_profile_public=True)
    make_guide(stranger, title="Not followed", published=True)

    response = client.get("/follows/feed", headers=auth_headers(student))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert [g["id"] for g in data["guides"]] == [published.id]
    assert data["guides"][0]["owner"]["first_name"] == "Grace"
    assert data["total"] == 1
    assert data["hasMore"] is False


def test_feed_paginates(client, teacher, student, follow, make_guide, auth_headers):
    follow(student, teacher)
    for i in range(3):
        make_guide(teacher, title=f"Guide {i}", published=True)

    response = client.get("/follows/feed?page=1&limit=2", headers=auth_headers(student))
    data = response.json()["data"]
    assert len(data["guides"]) == 2
    assert data["total"] == 3
    assert data["hasMore"] is True


def test_feed_empty_without_follows(client, student, auth_headers):
    data = client.get("/follows/feed", headers=auth_headers(student)).json()["data"]
    assert data["guides"] == []
    assert data["total"] == 0
