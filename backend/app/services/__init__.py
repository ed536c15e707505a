"""Domain services. Each takes the request's database session (or an injected client)."""

from .exam_grading import ExamGrader
from .flashcards import FlashcardProgressService
from .follows import FollowService
from .generation import StudyGuideGenerator
from .grading import GradingService
from .scoring import ShortAnswerScorer
from .student_classes import StudentClassService
from .students import StudentService
from .study_guides import StudyGuideService
from .teachers import TeacherService

__all__ = [
    "ExamGrader",
    "FlashcardProgressService",
    "FollowService",
    "GradingService",
    "ShortAnswerScorer",
    "StudentClassService",
    "StudentService",
    "StudyGuideGenerator",
    "StudyGuideService",
    "TeacherService",
]
