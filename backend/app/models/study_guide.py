"""Study guide model."""

from datetime import datetime, UTC
import uuid

from sqlalchemy import Boolean, Column, String, Text, DateTime, ForeignKey, Integer, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship

from ..database import Base
from .enums import GuideFormat


class StudyGuide(Base):
    """Study guide owned by a teacher, published at most once."""
    __tablename__ = "study_guides"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    subject = Column(String(100), nullable=False)
    grade_level = Column(String(50), nullable=False)
    format = Column(SQLEnum(GuideFormat, name="guide_format"), nullable=False)
    content = Column(Text, nullable=False)
    topic_focus = Column(String(255))
    difficulty_level = Column(String(50))
    additional_instructions = Column(Text)
    class_name = Column(String(255))
    file_count = Column(Integer, default=0)
    custom_content = Column(JSON)
    is_published = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    owner = relationship("UserProfile", back_populates="study_guides")
    flashcard_progress = relationship("FlashcardProgress", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<StudyGuide(id={self.id}, title='{self.title}', is_published={self.is_published})>"
