"""Pydantic request and response schemas.

Request bodies use camelCase on the wire (``teacherId``, ``sampleAnswer``);
responses mirror the stored columns in snake_case.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from .models.enums import GuideFormat, UserType


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---

class FollowCreate(CamelModel):
    teacher_id: Optional[str] = None


class StudentAdd(CamelModel):
    student_id: Optional[str] = None


class StudentClassCreate(CamelModel):
    student_id: Optional[str] = None
    class_name: Optional[str] = None
    class_period: Optional[str] = None


class OwnerBody(CamelModel):
    """Optional body carrying the caller id for clients without a session cookie."""
    user_id: Optional[str] = None


class GradeBreakdownItem(CamelModel):
    question_number: str
    marks_awarded: float = Field(ge=0)
    marks_possible: float = Field(ge=0)
    explanation: str = ""


class GradingResultCreate(CamelModel):
    student_first_name: Optional[str] = None
    student_last_name: Optional[str] = None
    student_name: Optional[str] = None
    student_user_id: Optional[str] = None
    exam_title: Optional[str] = None
    class_name: Optional[str] = None
    class_period: Optional[str] = None
    total_marks: int = Field(ge=0)
    total_possible_marks: int = Field(gt=0)
    grade_breakdown: List[GradeBreakdownItem] = []
    content: str = ""
    additional_comments: Optional[str] = None
    student_exam_filename: Optional[str] = None
    answer_sheet_filename: Optional[str] = None


# Whitespace-only values count as missing
RequiredTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
RequiredSubject = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
RequiredGradeLevel = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class StudyGuideCreate(CamelModel):
    title: RequiredTitle
    subject: RequiredSubject
    grade_level: RequiredGradeLevel
    format: GuideFormat
    content: str
    topic_focus: Optional[str] = None
    difficulty_level: Optional[str] = None
    class_name: Optional[str] = None
    file_count: int = Field(default=0, ge=0)
    custom_content: Optional[Any] = None
    additional_instructions: Optional[str] = None


class ScoreRequest(CamelModel):
    question: Optional[str] = None
    sample_answer: Optional[str] = None
    student_answer: Optional[str] = None
    subject: Optional[str] = None


class GuideCopyRequest(CamelModel):
    study_guide_id: Optional[str] = None


class FlashcardProgressUpdate(CamelModel):
    study_guide_id: Optional[str] = None
    card_id: Optional[str] = None
    status: Optional[str] = None


class ShareRequest(CamelModel):
    to: Optional[str] = None
    study_guide_title: Optional[str] = None
    study_guide_url: Optional[str] = None
    sender_name: Optional[str] = None
    message: Optional[str] = None


# --- Responses ---

class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ProfileSummary(ORMModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileOut(ProfileSummary):
    user_type: UserType
    display_name: Optional[str] = None
    bio: Optional[str] = None
    is_profile_public: bool = False
    created_at: Optional[datetime] = None


class TeacherSummary(ProfileSummary):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    is_profile_public: bool = False


class FollowOut(ORMModel):
    id: str
    follower_id: str
    teacher_id: str
    created_at: Optional[datetime] = None


class StudentClassOut(ORMModel):
    id: str
    student_id: str
    teacher_id: str
    class_name: str
    class_period: Optional[str] = None
    created_at: Optional[datetime] = None


class GuideSummary(ORMModel):
    id: str
    user_id: str
    title: str
    subject: str
    grade_level: str
    format: GuideFormat
    topic_focus: Optional[str] = None
    difficulty_level: Optional[str] = None
    class_name: Optional[str] = None
    file_count: Optional[int] = 0
    is_published: bool = False
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class StudyGuideOut(GuideSummary):
    content: str
    custom_content: Optional[Any] = None
    additional_instructions: Optional[str] = None


class GradeReportOut(ORMModel):
    id: str
    user_id: str
    created_at: Optional[datetime] = None
    student_name: str
    student_first_name: Optional[str] = None
    student_last_name: Optional[str] = None
    exam_title: Optional[str] = None
    class_name: Optional[str] = None
    class_period: Optional[str] = None
    total_marks: int
    total_possible_marks: int
    percentage: float
    grade: str


class GradingResultOut(GradeReportOut):
    student_user_id: Optional[str] = None
    content: Optional[str] = None
    grade_breakdown: Optional[List[Any]] = None
    additional_comments: Optional[str] = None
    student_exam_filename: Optional[str] = None
    answer_sheet_filename: Optional[str] = None


def dump(schema: type[BaseModel], obj: Any) -> dict:
    """Serialize an ORM object through a response schema."""
    return schema.model_validate(obj).model_dump(mode="json")


def dump_all(schema: type[BaseModel], objs) -> list:
    return [dump(schema, o) for o in objs]
