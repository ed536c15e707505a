"""Grade reports as seen by a teacher (per student) and by the student themselves."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, require_role
from app.database import get_db
from app.models import UserType
from app.responses import ok
from app.services import GradingService

router = APIRouter(tags=["Grade Reports"])


@router.get("/grade-reports/student/{student_id}")
async def student_grade_reports(
    student_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    return ok(GradingService(db).student_reports(user_id, student_id))


@router.get("/my-grade-reports")
async def my_grade_reports(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.student)
    return ok({"reports": GradingService(db).my_reports(user_id)})
