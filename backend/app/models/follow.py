"""Teacher follow model."""

from datetime import datetime, UTC
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base


class TeacherFollow(Base):
    """Directed edge: ``follower_id`` (usually a student) follows ``teacher_id``."""
    __tablename__ = "teacher_follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "teacher_id", name="uq_teacher_follows_follower_teacher"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    follower_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    follower = relationship("UserProfile", foreign_keys=[follower_id])
    teacher = relationship("UserProfile", foreign_keys=[teacher_id])

    def __repr__(self):
        return f"<TeacherFollow(follower_id={self.follower_id}, teacher_id={self.teacher_id})>"
