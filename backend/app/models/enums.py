"""Shared enums for models and auth."""
import enum

class UserType(enum.Enum):
    teacher = "teacher"
    student = "student"


class GuideFormat(enum.Enum):
    outline = "outline"
    flashcards = "flashcards"
    quiz = "quiz"
    summary = "summary"
    custom = "custom"


class FlashcardStatus(enum.Enum):
    mastered = "mastered"
    difficult = "difficult"
