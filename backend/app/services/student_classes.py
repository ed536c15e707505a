"""Class assignments a teacher keeps for their students."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.service import require_owner
from ..errors import Conflict, InvalidInput, NotFound
from ..models import StudentClass
from ..schemas import StudentClassCreate
from .students import StudentService

logger = logging.getLogger(__name__)


class StudentClassService:
    def __init__(self, db: Session):
        self.db = db

    def list_classes(self, teacher_id: str, student_id: Optional[str] = None) -> List[StudentClass]:
        query = self.db.query(StudentClass).filter(StudentClass.teacher_id == teacher_id)
        if student_id:
            query = query.filter(StudentClass.student_id == student_id)
        return query.order_by(StudentClass.class_name).all()

    def assign(self, teacher_id: str, payload: StudentClassCreate) -> StudentClass:
        class_name = (payload.class_name or "").strip()
        if not payload.student_id or not class_name:
            raise InvalidInput("Student ID and class name are required")
        StudentService(self.db).ensure_my_student(teacher_id, payload.student_id)

        assignment = StudentClass(
            student_id=payload.student_id,
            teacher_id=teacher_id,
            class_name=class_name,
            class_period=(payload.class_period or "").strip() or None,
        )
        self.db.add(assignment)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Student is already assigned to this class")
        self.db.refresh(assignment)
        return assignment

    def remove(self, teacher_id: str, class_id: str) -> None:
        assignment = self.db.get(StudentClass, class_id)
        if assignment is None:
            raise NotFound("Class assignment not found")
        require_owner(assignment.teacher_id, teacher_id, "You do not have permission to remove this class assignment")
        self.db.delete(assignment)
        self.db.commit()
