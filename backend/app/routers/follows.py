"""Follow edges from the follower's side, and the feed of followed teachers' guides."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.responses import created, ok
from app.schemas import FollowCreate, FollowOut, dump
from app.services import FollowService

router = APIRouter(prefix="/follows", tags=["Follows"])


def get_follow_service(db: Session = Depends(get_db)) -> FollowService:
    return FollowService(db)


@router.get("")
async def list_following(
    user_id: str = Depends(get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    """Teachers the caller follows, newest first."""
    return ok(service.list_following(user_id))


@router.post("", status_code=201)
async def follow_teacher(
    payload: FollowCreate,
    user_id: str = Depends(get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    follow = service.follow(user_id, payload.teacher_id)
    return created({"follow": dump(FollowOut, follow)})


@router.get("/feed")
async def feed(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    user_id: str = Depends(get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    """Published study guides from followed teachers."""
    return ok(service.feed(user_id, page=page, limit=limit))


@router.get("/{teacher_id}")
async def follow_status(
    teacher_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    return ok({"isFollowing": service.is_following(user_id, teacher_id)})


@router.delete("/{teacher_id}")
async def unfollow_teacher(
    teacher_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    service.unfollow(user_id, teacher_id)
    return ok()
