"""Test cases for SQLAlchemy models."""

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import (
    FlashcardProgress, FlashcardStatus, GradingResult, GuideFormat, StudentClass,
    StudyGuide, TeacherFollow, UserProfile, UserType,
)


class TestUserProfileModel:
    """Test cases for UserProfile model."""

    def test_create_profile(self, db_session):
        user = UserProfile(email="teacher@test.com", user_type=UserType.teacher, first_name="Jane", last_name="Smith")
        db_session.add(user)
        db_session.commit()

        assert len(user.id) == 36
        assert user.created_at is not None
        assert user.is_profile_public is False
        assert user.is_teacher and not user.is_student
        assert user.full_name == "Jane Smith"
        assert "teacher@test.com" in repr(user)

    def test_email_is_unique(self, db_session, make_user):
        make_user(email="dup@test.com")
        db_session.add(UserProfile(email="dup@test.com", user_type=UserType.student))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_password_hashing(self, make_user):
        user = make_user(password="Secret123")
        assert user.hashed_password != "Secret123"
        assert user.verify_password("Secret123")
        assert not user.verify_password("wrong")

    def test_sso_profile_has_no_password(self, make_user):
        user = make_user(clever_id="clever-1")
        assert user.verify_password("anything") is False


class TestTeacherFollowModel:
    def test_follow_pair_is_unique(self, db_session, teacher, student, follow):
        follow(student, teacher)
        db_session.add(TeacherFollow(follower_id=student.id, teacher_id=teacher.id))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_follow_relationships(self, teacher, student, follow):
        edge = follow(student, teacher)
        assert edge.teacher.id == teacher.id
        assert edge.follower.id == student.id


class TestStudentClassModel:
    def test_assignment_is_unique_per_class(self, db_session, teacher, student):
        db_session.add(StudentClass(student_id=student.id, teacher_id=teacher.id, class_name="Biology"))
        db_session.add(StudentClass(student_id=student.id, teacher_id=teacher.id, class_name="Chemistry"))
        db_session.commit()

        db_session.add(StudentClass(student_id=student.id, teacher_id=teacher.id, class_name="Biology"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
        assert db_session.query(StudentClass).count() == 2


class TestStudyGuideModel:
    def test_guide_defaults(self, teacher, make_guide):
        guide = make_guide(teacher)
        assert guide.is_published is False
        assert guide.published_at is None
        assert guide.format == GuideFormat.outline
        assert guide.owner.id == teacher.id
        assert teacher.study_guides == [guide]


class TestGradingResultModel:
    def test_result_links(self, teacher, student, make_result):
        linked = make_result(teacher, student)
        unlinked = make_result(teacher)
        assert linked.is_linked and not unlinked.is_linked
        assert linked.teacher.id == teacher.id
        assert linked.student.id == student.id
        assert "Jane Doe" in repr(linked)

    def test_deleting_teacher_removes_results(self, db_session, teacher, make_result):
        make_result(teacher)
        db_session.delete(teacher)
        db_session.commit()
        assert db_session.query(GradingResult).count() == 0
        assert db_session.query(StudyGuide).count() == 0


class TestFlashcardProgressModel:
    def test_one_mark_per_card(self, db_session, student, teacher, make_guide):
        guide = make_guide(teacher, published=True)
        db_session.add(FlashcardProgress(
            user_id=student.id, study_guide_id=guide.id, card_id="card-1", status=FlashcardStatus.mastered,
        ))
        db_session.commit()

        db_session.add(FlashcardProgress(
            user_id=student.id, study_guide_id=guide.id, card_id="card-1", status=FlashcardStatus.difficult,
        ))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_deleting_guide_removes_progress(self, db_session, student, teacher, make_guide):
        guide = make_guide(teacher, published=True)
        db_session.add(FlashcardProgress(
            user_id=student.id, study_guide_id=guide.id, card_id="card-1", status=FlashcardStatus.mastered,
        ))
        db_session.commit()

        db_session.delete(guide)
        db_session.commit()
        assert db_session.query(FlashcardProgress).count() == 0
