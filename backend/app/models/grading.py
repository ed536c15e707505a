"""Grading result model."""

from datetime import datetime, UTC
import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, JSON, Numeric
from sqlalchemy.orm import relationship

from ..database import Base


def letter_grade(percentage: float) -> str:
    """American letter grade for a percentage score."""
    if percentage >= 90:
        return "A"
    if percentage >= 80:
        return "B"
    if percentage >= 70:
        return "C"
    if percentage >= 60:
        return "D"
    return "F"


class GradingResult(Base):
    """A graded exam, optionally linked to a student account."""
    __tablename__ = "grading_results"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    student_user_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    student_name = Column(String(255), nullable=False)
    student_first_name = Column(String(100))
    student_last_name = Column(String(100), index=True)
    exam_title = Column(String(255), index=True)
    class_name = Column(String(255), index=True)
    class_period = Column(String(50))
    answer_sheet_filename = Column(String(500))
    student_exam_filename = Column(String(500))
    total_marks = Column(Integer, nullable=False)
    total_possible_marks = Column(Integer, nullable=False)
    percentage = Column(Numeric(5, 2), nullable=False)
    grade = Column(String(2), nullable=False, index=True)
    content = Column(Text, default="")
    grade_breakdown = Column(JSON, default=list)
    additional_comments = Column(Text)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    teacher = relationship("UserProfile", back_populates="grading_results", foreign_keys=[user_id])
    student = relationship("UserProfile", foreign_keys=[student_user_id])

    def __repr__(self):
        return f"<GradingResult(id={self.id}, student_name='{self.student_name}', grade='{self.grade}')>"

    @property
    def is_linked(self) -> bool:
        """Whether the result is attached to a student account."""
        return self.student_user_id is not None
