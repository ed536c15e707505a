"""Public teacher directory."""
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..errors import InvalidInput, NotFound
from ..models import StudyGuide, TeacherFollow, UserProfile, UserType
from ..schemas import GuideSummary, TeacherSummary, dump, dump_all
from .follows import paginate


class TeacherService:
    def __init__(self, db: Session):
        self.db = db

    def _public_teachers(self):
        return self.db.query(UserProfile).filter(
            UserProfile.user_type == UserType.teacher,
            UserProfile.is_profile_public.is_(True),
        )

    def list_public(self, page: int = 1, limit: int = 20) -> dict:
        query = self._public_teachers()
        total = query.count()
        teachers = (
            query.order_by(UserProfile.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {"teachers": dump_all(TeacherSummary, teachers), **paginate(page, limit, total)}

    def search(self, q: str, limit: int = 10) -> List[dict]:
        term = (q or "").strip().lower()
        if not term:
            return []
        pattern = f"%{term}%"
        teachers = (
            self._public_teachers()
            .filter(or_(
                func.lower(UserProfile.display_name).like(pattern),
                func.lower(UserProfile.first_name).like(pattern),
                func.lower(UserProfile.last_name).like(pattern),
            ))
            .limit(max(1, min(limit, 50)))
            .all()
        )
        return dump_all(TeacherSummary, teachers)

    def profile(self, teacher_id: str, viewer_id: Optional[str] = None) -> dict:
        """Teacher profile with counts.

        Guides are listed only for the teacher themselves (all guides) or a
        follower (published guides).
        """
        teacher = self.db.get(UserProfile, teacher_id)
        if teacher is None:
            raise NotFound("Teacher not found")
        if teacher.user_type != UserType.teacher:
            raise InvalidInput("This user is not a teacher")

        is_self = viewer_id == teacher_id
        has_relationship = False
        if viewer_id and not is_self:
            has_relationship = self.db.query(TeacherFollow.id).filter(
                TeacherFollow.follower_id == viewer_id,
                TeacherFollow.teacher_id == teacher_id,
            ).first() is not None

        guides_query = self.db.query(StudyGuide).filter(StudyGuide.user_id == teacher_id)
        if not is_self:
            guides_query = guides_query.filter(StudyGuide.is_published.is_(True))
        guide_count = guides_query.count()
        student_count = self.db.query(TeacherFollow).filter(TeacherFollow.teacher_id == teacher_id).count()

        guides = []
        if is_self or has_relationship:
            guides = dump_all(GuideSummary, guides_query.order_by(StudyGuide.created_at.desc()).all())

        data = dump(TeacherSummary, teacher)
        data.update({
            "created_at": teacher.created_at,
            "guideCount": guide_count,
            "studentCount": student_count,
        })
        return {
            "teacher": data,
            "guides": guides,
            "hasRelationship": has_relationship,
            "isSelf": is_self,
        }
