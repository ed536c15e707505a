"""Graded exams recorded by teachers. Results are never edited, only deleted."""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, require_role, resolve_identity
from app.database import get_db
from app.errors import Unauthenticated
from app.models import UserType
from app.responses import created, ok
from app.schemas import GradingResultCreate, GradingResultOut, OwnerBody, dump, dump_all
from app.services import GradingService

router = APIRouter(prefix="/grading-results", tags=["Grading"])


@router.post("", status_code=201)
async def create_grading_result(
    payload: GradingResultCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    result = GradingService(db).create_result(user_id, payload)
    return created(dump(GradingResultOut, result))


@router.get("")
async def list_grading_results(
    class_name: Optional[str] = Query(None, alias="className"),
    exam_title: Optional[str] = Query(None, alias="examTitle"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    require_role(db, user_id, UserType.teacher)
    results = GradingService(db).list_results(user_id, class_name=class_name, exam_title=exam_title)
    return ok(dump_all(GradingResultOut, results))


@router.get("/{result_id}")
async def get_grading_result(
    result_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ok(dump(GradingResultOut, GradingService(db).get_result(result_id, user_id)))


@router.delete("/{result_id}")
async def delete_grading_result(
    result_id: str,
    request: Request,
    body: Optional[OwnerBody] = Body(None),
    db: Session = Depends(get_db),
):
    """Delete a result. The caller may be identified by session or by ``userId`` in the body."""
    user_id = resolve_identity(request, body.user_id if body else None)
    if user_id is None:
        raise Unauthenticated()
    GradingService(db).delete_result(result_id, user_id)
    return ok()
