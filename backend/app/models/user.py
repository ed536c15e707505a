"""User profile model."""

from datetime import datetime, UTC
import uuid

import bcrypt
from sqlalchemy import Boolean, Column, String, Text, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship

from ..database import Base
from .enums import UserType


class UserProfile(Base):
    """Account profile for teachers and students."""
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=True)
    user_type = Column(SQLEnum(UserType, name="user_type"), nullable=False, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    display_name = Column(String(255))
    bio = Column(Text)
    is_profile_public = Column(Boolean, default=False, nullable=False)
    clever_id = Column(String(64), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    # Relationships
    study_guides = relationship("StudyGuide", back_populates="owner", cascade="all, delete-orphan")
    grading_results = relationship(
        "GradingResult",
        back_populates="teacher",
        foreign_keys="GradingResult.user_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<UserProfile(id={self.id}, email='{self.email}', user_type={self.user_type})>"

    @property
    def is_teacher(self) -> bool:
        return self.user_type == UserType.teacher

    @property
    def is_student(self) -> bool:
        return self.user_type == UserType.student

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def set_password(self, password: str) -> None:
        """Hash and set the user's password."""
        salt = bcrypt.gensalt()
        self.hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify_password(self, password: str) -> bool:
        """Verify the provided password against the stored hash."""
        if not self.hashed_password:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.hashed_password.encode('utf-8'))
