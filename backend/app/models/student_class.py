"""Student class assignment model."""

from datetime import datetime, UTC
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from ..database import Base


class StudentClass(Base):
    """A student placed in one of a teacher's classes."""
    __tablename__ = "student_classes"
    __table_args__ = (
        UniqueConstraint("student_id", "teacher_id", "class_name", name="uq_student_classes_student_teacher_class"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    class_name = Column(String(255), nullable=False, index=True)
    class_period = Column(String(50))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    def __repr__(self):
        return f"<StudentClass(id={self.id}, class_name='{self.class_name}')>"
