"""Student lookup."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.responses import ok
from app.services import StudentService

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/search")
async def search_students(
    q: str = "",
    limit: int = 10,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Substring search over student email and names. ``limit`` is clamped to 1..50."""
    return ok(StudentService(db).search(q, limit))


@router.get("/suggest")
async def suggest_students(
    first_name: str = Query("", alias="firstName"),
    last_name: str = Query("", alias="lastName"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Best matches for a name among the caller's own students."""
    return ok(StudentService(db).suggest(user_id, first_name, last_name))
