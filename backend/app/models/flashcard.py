"""Flashcard progress model."""

from datetime import datetime, UTC
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum

from ..database import Base
from .enums import FlashcardStatus


class FlashcardProgress(Base):
    """One learner's mark on one card of a flashcard study guide."""
    __tablename__ = "flashcard_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "study_guide_id", "card_id", name="uq_flashcard_progress_user_guide_card"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    study_guide_id = Column(String(36), ForeignKey("study_guides.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id = Column(String(100), nullable=False)
    status = Column(SQLEnum(FlashcardStatus, name="flashcard_status"), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    def __repr__(self):
        return f"<FlashcardProgress(card_id='{self.card_id}', status={self.status})>"
