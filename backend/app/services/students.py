"""Student lookup for teachers: search, the roster (students following a teacher) and name suggestions."""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import Conflict, InvalidInput, NotFound
from ..models import TeacherFollow, UserProfile, UserType
from ..schemas import ProfileSummary, dump, dump_all

logger = logging.getLogger(__name__)

SEARCH_LIMIT_MAX = 50
SUGGESTION_LIMIT = 5


def _ilike(column, term: str):
    return func.lower(column).like(f"%{term.lower()}%")


def score_suggestion(
    first_name: Optional[str],
    last_name: Optional[str],
    query_first: str = "",
    query_last: str = "",
) -> int:
    """Relevance of a student for a first/last name query.

    With both query names, each name earns +10 for an exact match and +5 for
    a substring match, independently. With a single query name, that name is
    compared to its own column only: +10 if exact, otherwise +5 if contained.
    """
    fn = (first_name or "").lower()
    ln = (last_name or "").lower()
    qf = query_first.strip().lower()
    ql = query_last.strip().lower()

    if qf and ql:
        score = 0
        if fn == qf:
            score += 10
        if ln == ql:
            score += 10
        if qf in fn:
            score += 5
        if ql in ln:
            score += 5
        return score

    term, value = (qf, fn) if qf else (ql, ln)
    if not term:
        return 0
    if value == term:
        return 10
    if term in value:
        return 5
    return 0


def rank_suggestions(
    students: Iterable[UserProfile],
    query_first: str = "",
    query_last: str = "",
    limit: int = SUGGESTION_LIMIT,
) -> List[dict]:
    """Score and order candidates; ties keep their incoming order."""
    scored = []
    for student in students:
        item = dump(ProfileSummary, student)
        item["score"] = score_suggestion(student.first_name, student.last_name, query_first, query_last)
        scored.append(item)
    # sorted() is stable
    scored = sorted(scored, key=lambda s: s["score"], reverse=True)
    return scored[:limit]


class StudentService:
    def __init__(self, db: Session):
        self.db = db

    def _follower_ids(self, teacher_id: str):
        return select(TeacherFollow.follower_id).where(TeacherFollow.teacher_id == teacher_id)

    def is_my_student(self, teacher_id: str, student_id: str) -> bool:
        return self.db.query(TeacherFollow.id).filter(
            TeacherFollow.teacher_id == teacher_id,
            TeacherFollow.follower_id == student_id,
        ).first() is not None

    def ensure_my_student(self, teacher_id: str, student_id: str) -> None:
        """Raise NotFound unless the student follows the teacher."""
        if not self.is_my_student(teacher_id, student_id):
            raise NotFound("Student not found in your list")

    def search(self, q: str, limit: int = 10) -> List[dict]:
        term = (q or "").strip()
        if not term:
            return []
        limit = max(1, min(limit, SEARCH_LIMIT_MAX))
        students = (
            self.db.query(UserProfile)
            .filter(UserProfile.user_type == UserType.student)
            .filter(or_(
                _ilike(UserProfile.email, term),
                _ilike(UserProfile.first_name, term),
                _ilike(UserProfile.last_name, term),
            ))
            .order_by(UserProfile.last_name, UserProfile.first_name)
            .limit(limit)
            .all()
        )
        return dump_all(ProfileSummary, students)

    def suggest(self, teacher_id: str, first_name: str = "", last_name: str = "") -> List[dict]:
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        if not first_name and not last_name:
            return []

        query = (
            self.db.query(UserProfile)
            .filter(UserProfile.id.in_(self._follower_ids(teacher_id)))
            .filter(UserProfile.user_type == UserType.student)
        )
        if first_name and last_name:
            query = query.filter(
                _ilike(UserProfile.first_name, first_name),
                _ilike(UserProfile.last_name, last_name),
            )
        else:
            term = first_name or last_name
            query = query.filter(or_(
                _ilike(UserProfile.first_name, term),
                _ilike(UserProfile.last_name, term),
            ))

        candidates = query.order_by(UserProfile.created_at).all()
        return rank_suggestions(candidates, first_name, last_name)

    def list_my_students(self, teacher_id: str) -> List[dict]:
        rows = (
            self.db.query(TeacherFollow, UserProfile)
            .outerjoin(UserProfile, UserProfile.id == TeacherFollow.follower_id)
            .filter(TeacherFollow.teacher_id == teacher_id)
            .order_by(TeacherFollow.created_at.desc())
            .all()
        )
        students = []
        for follow, profile in rows:
            if profile is None:
                continue
            students.append({
                "id": follow.id,
                "created_at": follow.created_at,
                "follower_id": follow.follower_id,
                "student": dump(ProfileSummary, profile),
            })
        return students

    def add_student(self, teacher_id: str, student_id: Optional[str]) -> TeacherFollow:
        if not student_id:
            raise InvalidInput("Student ID is required")
        student = self.db.get(UserProfile, student_id)
        if student is None or student.user_type != UserType.student:
            raise InvalidInput("Invalid student")
        if self.is_my_student(teacher_id, student_id):
            raise Conflict("Student already added")

        follow = TeacherFollow(follower_id=student_id, teacher_id=teacher_id)
        self.db.add(follow)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Student already added")
        self.db.refresh(follow)
        logger.info(f"Teacher {teacher_id} added student {student_id}")
        return follow

    def remove_student(self, teacher_id: str, student_id: str) -> None:
        self.db.query(TeacherFollow).filter(
            TeacherFollow.teacher_id == teacher_id,
            TeacherFollow.follower_id == student_id,
        ).delete(synchronize_session=False)
        self.db.commit()
