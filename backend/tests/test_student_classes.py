"""Tests for class assignments."""
from fastapi import status

from app.models import StudentClass, UserType


def test_assign_and_list_classes(client, teacher, student, follow, auth_headers):
    follow(student, teacher)
    headers = auth_headers(teacher)

    response = client.post(
        "/student-classes",
        json={"studentId": student.id, "className": "  Biology  ", "classPeriod": "  "},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assigned = response.json()["data"]["class"]
    assert assigned["class_name"] == "Biology"
    assert assigned["class_period"] is None

    client.post("/student-classes", json={"studentId": student.id, "className": "Algebra"}, headers=headers)
    classes = client.get(f"/student-classes?studentId={student.id}", headers=headers).json()["data"]
    assert [c["class_name"] for c in classes] == ["Algebra", "Biology"]


def test_assign_requires_fields(client, teacher, student, follow, auth_headers):
    follow(student, teacher)
    headers = auth_headers(teacher)
    for body in ({}, {"studentId": student.id}, {"studentId": student.id, "className": "   "}):
        response = client.post("/student-classes", json=body, headers=headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Student ID and class name are required"


def test_assign_requires_own_student(client, teacher, student, auth_headers):
    response = client.post(
        "/student-classes",
        json={"studentId": student.id, "className": "Biology"},
        headers=auth_headers(teacher),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_duplicate_assignment_conflicts(client, db_session, teacher, student, follow, auth_headers):
    follow(student, teacher)
    headers = auth_headers(teacher)
    body = {"studentId": student.id, "className": "Biology"}

    assert client.post("/student-classes", json=body, headers=headers).status_code == status.HTTP_201_CREATED
    response = client.post("/student-classes", json=body, headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert db_session.query(StudentClass).count() == 1


def test_remove_assignment(client, db_session, teacher, student, make_user, follow, auth_headers):
    follow(student, teacher)
    created = client.post(
        "/student-classes",
        json={"studentId": student.id, "className": "Biology"},
        headers=auth_headers(teacher),
    ).json()["data"]["class"]

    other = make_user(UserType.teacher)
    forbidden = client.delete(f"/student-classes/{created['id']}", headers=auth_headers(other))
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"/student-classes/{created['id']}", headers=auth_headers(teacher))
    assert response.json() == {"success": True}
    assert db_session.query(StudentClass).count() == 0

    missing = client.delete(f"/student-classes/{created['id']}", headers=auth_headers(teacher))
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_student_classes_are_teacher_only(client, student, auth_headers):
    assert client.get("/student-classes", headers=auth_headers(student)).status_code == status.HTTP_403_FORBIDDEN
