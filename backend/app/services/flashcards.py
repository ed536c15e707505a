"""Per-learner flashcard progress on a study guide."""
import logging
from typing import Dict

from sqlalchemy.orm import Session

from ..errors import InvalidInput
from ..models import FlashcardProgress, FlashcardStatus
from .study_guides import StudyGuideService

logger = logging.getLogger(__name__)


class FlashcardProgressService:
    def __init__(self, db: Session):
        self.db = db

    def _check_guide(self, guide_id: str, user_id: str) -> None:
        # progress is only kept on guides the learner can open
        StudyGuideService(self.db).get_for_viewer(guide_id, user_id)

    def get(self, guide_id: str, user_id: str) -> Dict[str, str]:
        """Map of card id to status for every card the learner has marked."""
        self._check_guide(guide_id, user_id)
        rows = (
            self.db.query(FlashcardProgress)
            .filter(FlashcardProgress.user_id == user_id, FlashcardProgress.study_guide_id == guide_id)
            .all()
        )
        return {row.card_id: row.status.value for row in rows}

    def save(self, guide_id: str, user_id: str, card_id: str, status: str) -> FlashcardProgress:
        try:
            card_status = FlashcardStatus(status)
        except ValueError:
            raise InvalidInput('Status must be "mastered" or "difficult"') from None
        self._check_guide(guide_id, user_id)

        row = (
            self.db.query(FlashcardProgress)
            .filter(
                FlashcardProgress.user_id == user_id,
                FlashcardProgress.study_guide_id == guide_id,
                FlashcardProgress.card_id == card_id,
            )
            .first()
        )
        if row is None:
            row = FlashcardProgress(user_id=user_id, study_guide_id=guide_id, card_id=card_id, status=card_status)
            self.db.add(row)
        else:
            row.status = card_status
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"User {user_id} marked card {card_id} of guide {guide_id} as {card_status.value}")
        return row

    def reset(self, guide_id: str, user_id: str) -> int:
        self._check_guide(guide_id, user_id)
        deleted = (
            self.db.query(FlashcardProgress)
            .filter(FlashcardProgress.user_id == user_id, FlashcardProgress.study_guide_id == guide_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"User {user_id} reset {deleted} flashcard mark(s) on guide {guide_id}")
        return deleted
