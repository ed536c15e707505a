"""Grading results and the grade reports built from them.

Results are immutable once recorded; only the owning teacher may delete one.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..auth.service import require_owner
from ..errors import InvalidInput, NotFound
from ..models import GradingResult, UserProfile, letter_grade
from ..schemas import (
    GradeReportOut,
    GradingResultCreate,
    ProfileSummary,
    dump,
    dump_all,
)
from .students import StudentService

logger = logging.getLogger(__name__)


def compute_percentage(total_marks: int, total_possible_marks: int) -> float:
    return round(total_marks / total_possible_marks * 100, 2)


def student_display_name(first: Optional[str], last: Optional[str], explicit: Optional[str] = None) -> str:
    if explicit and explicit.strip():
        return explicit.strip()
    return " ".join(part.strip() for part in (first, last) if part and part.strip()) or "Unknown Student"


class GradingService:
    def __init__(self, db: Session):
        self.db = db

    def create_result(self, teacher_id: str, payload: GradingResultCreate) -> GradingResult:
        if payload.total_marks > payload.total_possible_marks:
            raise InvalidInput("totalMarks cannot exceed totalPossibleMarks")
        if payload.student_user_id:
            StudentService(self.db).ensure_my_student(teacher_id, payload.student_user_id)

        percentage = compute_percentage(payload.total_marks, payload.total_possible_marks)
        result = GradingResult(
            user_id=teacher_id,
            student_user_id=payload.student_user_id or None,
            student_name=student_display_name(
                payload.student_first_name, payload.student_last_name, payload.student_name
            ),
            student_first_name=payload.student_first_name,
            student_last_name=payload.student_last_name,
            exam_title=payload.exam_title,
            class_name=payload.class_name,
            class_period=payload.class_period,
            total_marks=payload.total_marks,
            total_possible_marks=payload.total_possible_marks,
            percentage=percentage,
            grade=letter_grade(percentage),
            content=payload.content,
            grade_breakdown=[item.model_dump(by_alias=True) for item in payload.grade_breakdown],
            additional_comments=payload.additional_comments,
            student_exam_filename=payload.student_exam_filename,
            answer_sheet_filename=payload.answer_sheet_filename,
        )
        self.db.add(result)
        self.db.commit()
        self.db.refresh(result)
        logger.info(f"Teacher {teacher_id} recorded grading result {result.id} ({result.grade})")
        return result

    def list_results(
        self,
        teacher_id: str,
        class_name: Optional[str] = None,
        exam_title: Optional[str] = None,
    ) -> List[GradingResult]:
        query = self.db.query(GradingResult).filter(GradingResult.user_id == teacher_id)
        if class_name:
            query = query.filter(GradingResult.class_name == class_name)
        if exam_title:
            query = query.filter(GradingResult.exam_title == exam_title)
        return query.order_by(GradingResult.created_at.desc()).all()

    def get_result(self, result_id: str, user_id: str) -> GradingResult:
        """Owner or linked student only; anyone else sees NotFound."""
        result = self.db.get(GradingResult, result_id)
        if result is None or user_id not in (result.user_id, result.student_user_id):
            raise NotFound("Grading result not found")
        return result

    def delete_result(self, result_id: str, user_id: str) -> None:
        result = self.db.get(GradingResult, result_id)
        if result is None:
            raise NotFound("Grading result not found")
        require_owner(result.user_id, user_id, "You do not have permission to delete this grading result")
        self.db.delete(result)
        self.db.commit()
        logger.info(f"Deleted grading result {result_id}")

    def student_reports(self, teacher_id: str, student_id: str) -> dict:
        """Reports a teacher recorded for one of their students."""
        StudentService(self.db).ensure_my_student(teacher_id, student_id)
        reports = (
            self.db.query(GradingResult)
            .filter(
                GradingResult.user_id == teacher_id,
                GradingResult.student_user_id == student_id,
            )
            .order_by(GradingResult.created_at.desc())
            .all()
        )
        profile = self.db.get(UserProfile, student_id)
        student = dump(ProfileSummary, profile) if profile else {"id": student_id}
        return {"student": student, "reports": dump_all(GradeReportOut, reports)}

    def my_reports(self, student_id: str) -> List[dict]:
        """Reports linked to a student, each with the grading teacher's name."""
        reports = (
            self.db.query(GradingResult)
            .filter(GradingResult.student_user_id == student_id)
            .order_by(GradingResult.created_at.desc())
            .all()
        )
        teacher_ids = {r.user_id for r in reports}
        teachers = {}
        if teacher_ids:
            for t in self.db.query(UserProfile).filter(UserProfile.id.in_(teacher_ids)):
                teachers[t.id] = {"first_name": t.first_name, "last_name": t.last_name, "email": t.email}

        items = []
        for report in reports:
            item = dump(GradeReportOut, report)
            item["teacher"] = teachers.get(report.user_id, {"email": "Unknown Teacher"})
            items.append(item)
        return items
