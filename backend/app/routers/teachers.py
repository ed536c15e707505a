"""Public teacher directory."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import get_optional_user_id
from app.database import get_db
from app.responses import ok
from app.services import TeacherService

router = APIRouter(prefix="/teachers", tags=["Teachers"])


@router.get("")
async def list_teachers(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return ok(TeacherService(db).list_public(page=page, limit=limit))


@router.get("/search")
async def search_teachers(q: str = "", limit: int = 10, db: Session = Depends(get_db)):
    return ok(TeacherService(db).search(q, limit))


@router.get("/{teacher_id}")
async def teacher_profile(
    teacher_id: str,
    viewer_id: Optional[str] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    return ok(TeacherService(db).profile(teacher_id, viewer_id))
