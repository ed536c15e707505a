"""SQLAlchemy models for CasanovaStudy."""

from .enums import UserType, GuideFormat, FlashcardStatus
from .user import UserProfile
from .follow import TeacherFollow
from .student_class import StudentClass
from .study_guide import StudyGuide
from .grading import GradingResult, letter_grade
from .flashcard import FlashcardProgress

__all__ = [
    "UserType",
    "GuideFormat",
    "FlashcardStatus",
    "UserProfile",
    "TeacherFollow",
    "StudentClass",
    "StudyGuide",
    "GradingResult",
    "FlashcardProgress",
    "letter_grade",
]
