"""A teacher's roster: the students following them."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, require_role
from app.database import get_db
from app.models import UserType
from app.responses import created, ok
from app.schemas import FollowOut, StudentAdd, dump
from app.services import StudentService

router = APIRouter(prefix="/my-students", tags=["Students"])


@router.get("")
async def list_my_students(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    return ok(StudentService(db).list_my_students(user_id))


@router.post("", status_code=201)
async def add_student(
    payload: StudentAdd,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    follow = StudentService(db).add_student(user_id, payload.student_id)
    return created(dump(FollowOut, follow))


@router.delete("/{student_id}")
async def remove_student(
    student_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    StudentService(db).remove_student(user_id, student_id)
    return ok()
