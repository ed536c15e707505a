"""Follow edges between a user and a teacher, and the feed they unlock."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import Conflict, Forbidden, InvalidInput, NotFound
from ..models import StudyGuide, TeacherFollow, UserProfile, UserType
from ..schemas import GuideSummary, TeacherSummary, dump

logger = logging.getLogger(__name__)


def paginate(page: int, limit: int, total: int) -> dict:
    """Paging metadata shared by list endpoints."""
    offset = (page - 1) * limit
    return {"page": page, "limit": limit, "total": total, "hasMore": offset + limit < total}


class FollowService:
    def __init__(self, db: Session):
        self.db = db

    def _edge(self, follower_id: str, teacher_id: str) -> Optional[TeacherFollow]:
        return self.db.query(TeacherFollow).filter(
            TeacherFollow.follower_id == follower_id,
            TeacherFollow.teacher_id == teacher_id,
        ).first()

    def list_following(self, user_id: str) -> List[dict]:
        follows = (
            self.db.query(TeacherFollow)
            .filter(TeacherFollow.follower_id == user_id)
            .order_by(TeacherFollow.created_at.desc())
            .all()
        )
        return [
            {
                "id": follow.id,
                "created_at": follow.created_at,
                "teacher": dump(TeacherSummary, follow.teacher) if follow.teacher else None,
            }
            for follow in follows
        ]

    def follow(self, user_id: str, teacher_id: Optional[str]) -> TeacherFollow:
        if not teacher_id:
            raise InvalidInput("Teacher ID is required")
        if teacher_id == user_id:
            raise InvalidInput("You cannot follow yourself")

        teacher = self.db.get(UserProfile, teacher_id)
        if teacher is None:
            raise NotFound("Teacher not found")
        if teacher.user_type != UserType.teacher:
            raise InvalidInput("You can only follow teachers")
        if not teacher.is_profile_public:
            raise Forbidden("This teacher has not made their profile public")
        if self._edge(user_id, teacher_id) is not None:
            raise Conflict("You are already following this teacher")

        follow = TeacherFollow(follower_id=user_id, teacher_id=teacher_id)
        self.db.add(follow)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("You are already following this teacher")
        self.db.refresh(follow)
        logger.info(f"User {user_id} followed teacher {teacher_id}")
        return follow

    def is_following(self, user_id: str, teacher_id: str) -> bool:
        return self._edge(user_id, teacher_id) is not None

    def unfollow(self, user_id: str, teacher_id: str) -> None:
        """Remove the edge if present. Missing edges are not an error."""
        self.db.query(TeacherFollow).filter(
            TeacherFollow.follower_id == user_id,
            TeacherFollow.teacher_id == teacher_id,
        ).delete(synchronize_session=False)
        self.db.commit()

    def feed(self, user_id: str, page: int = 1, limit: int = 12) -> dict:
        """Published guides from followed teachers, newest first."""
        teacher_ids = [
            row.teacher_id
            for row in self.db.query(TeacherFollow.teacher_id).filter(TeacherFollow.follower_id == user_id)
        ]
        if not teacher_ids:
            return {"guides": [], **paginate(page, limit, 0)}

        query = self.db.query(StudyGuide).filter(
            StudyGuide.user_id.in_(teacher_ids),
            StudyGuide.is_published.is_(True),
        )
        total = query.count()
        guides = (
            query.order_by(StudyGuide.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        items = []
        for guide in guides:
            item = dump(GuideSummary, guide)
            owner = guide.owner
            item["owner"] = {
                "id": owner.id,
                "first_name": owner.first_name,
                "last_name": owner.last_name,
                "display_name": owner.display_name,
            }
            items.append(item)
        return {"guides": items, **paginate(page, limit, total)}
