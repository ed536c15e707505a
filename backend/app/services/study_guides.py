"""Study guide storage and the one-way publish transition."""
import logging
from datetime import datetime, UTC

from sqlalchemy.orm import Session

from ..auth.service import require_owner
from ..errors import InvalidInput, NotFound
from ..models import StudyGuide
from ..schemas import StudyGuideCreate

logger = logging.getLogger(__name__)


class StudyGuideService:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, guide_id: str) -> StudyGuide:
        guide = self.db.get(StudyGuide, guide_id)
        if guide is None:
            raise NotFound("Study guide not found")
        return guide

    def create(self, user_id: str, payload: StudyGuideCreate) -> StudyGuide:
        guide = StudyGuide(
            user_id=user_id,
            title=payload.title.strip(),
            subject=payload.subject.strip(),
            grade_level=payload.grade_level.strip(),
            format=payload.format,
            content=payload.content,
            topic_focus=payload.topic_focus,
            difficulty_level=payload.difficulty_level,
            class_name=payload.class_name,
            file_count=payload.file_count,
            custom_content=payload.custom_content,
            additional_instructions=payload.additional_instructions,
            is_published=False,
        )
        self.db.add(guide)
        self.db.commit()
        self.db.refresh(guide)
        logger.info(f"User {user_id} saved study guide {guide.id}")
        return guide

    def get_for_viewer(self, guide_id: str, user_id: str) -> StudyGuide:
        """Published guides are visible to any caller; drafts only to their owner."""
        guide = self.db.get(StudyGuide, guide_id)
        if guide is None or (not guide.is_published and guide.user_id != user_id):
            raise NotFound("Study guide not found")
        return guide

    def publish(self, guide_id: str, user_id: str) -> StudyGuide:
        guide = self._get(guide_id)
        require_owner(guide.user_id, user_id, "You can only publish your own study guides")
        if guide.is_published:
            raise InvalidInput("This study guide is already published")

        guide.is_published = True
        guide.published_at = datetime.now(UTC)
        self.db.commit()
        self.db.refresh(guide)
        logger.info(f"Published study guide {guide_id}")
        return guide

    def delete(self, guide_id: str, user_id: str) -> None:
        guide = self._get(guide_id)
        require_owner(guide.user_id, user_id, "You do not have permission to delete this study guide")
        self.db.delete(guide)
        self.db.commit()
        logger.info(f"Deleted study guide {guide_id}")

    def copy(self, guide_id: str, user_id: str) -> StudyGuide:
        """Duplicate a visible guide into the caller's library as an unpublished draft."""
        source = self.get_for_viewer(guide_id, user_id)
        if source.user_id == user_id:
            raise InvalidInput("You already own this study guide")

        guide = StudyGuide(
            user_id=user_id,
            title=source.title,
            subject=source.subject,
            grade_level=source.grade_level,
            format=source.format,
            content=source.content,
            topic_focus=source.topic_focus,
            difficulty_level=source.difficulty_level,
            additional_instructions=source.additional_instructions,
            file_count=source.file_count,
            custom_content=source.custom_content,
            is_published=False,
        )
        self.db.add(guide)
        self.db.commit()
        self.db.refresh(guide)
        logger.info(f"User {user_id} copied study guide {guide_id} as {guide.id}")
        return guide
