"""Class assignments a teacher keeps for their students."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, require_role
from app.database import get_db
from app.models import UserType
from app.responses import created, ok
from app.schemas import StudentClassCreate, StudentClassOut, dump, dump_all
from app.services import StudentClassService

router = APIRouter(prefix="/student-classes", tags=["Student Classes"])


@router.get("")
async def list_student_classes(
    student_id: Optional[str] = Query(None, alias="studentId"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    classes = StudentClassService(db).list_classes(user_id, student_id)
    return ok(dump_all(StudentClassOut, classes))


@router.post("", status_code=201)
async def assign_student_class(
    payload: StudentClassCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    assignment = StudentClassService(db).assign(user_id, payload)
    return created({"class": dump(StudentClassOut, assignment)})


@router.delete("/{class_id}")
async def remove_student_class(
    class_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    StudentClassService(db).remove(user_id, class_id)
    return ok()
