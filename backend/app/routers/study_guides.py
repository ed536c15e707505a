"""Saved study guides and the publish transition."""
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, resolve_identity
from app.database import get_db
from app.errors import InvalidInput, Unauthenticated
from app.responses import created, ok
from app.schemas import GuideCopyRequest, OwnerBody, StudyGuideCreate, StudyGuideOut, dump
from app.services import StudyGuideService

router = APIRouter(prefix="/study-guides", tags=["Study Guides"])


def get_study_guide_service(db: Session = Depends(get_db)) -> StudyGuideService:
    return StudyGuideService(db)


@router.post("", status_code=201)
async def create_study_guide(
    payload: StudyGuideCreate,
    user_id: str = Depends(get_current_user_id),
    service: StudyGuideService = Depends(get_study_guide_service),
):
    return created(dump(StudyGuideOut, service.create(user_id, payload)))


@router.post("/copy", status_code=201)
async def copy_study_guide(
    payload: GuideCopyRequest,
    user_id: str = Depends(get_current_user_id),
    service: StudyGuideService = Depends(get_study_guide_service),
):
    """Copy a published guide (or one of the caller's own drafts) into the caller's library."""
    if not payload.study_guide_id:
        raise InvalidInput("Study guide ID is required")
    guide = service.copy(payload.study_guide_id, user_id)
    return created(
        {"studyGuide": dump(StudyGuideOut, guide), "studyGuideUrl": f"/study-guide/{guide.id}"},
        message="Study guide copied to your library",
    )


@router.get("/{guide_id}")
async def get_study_guide(
    guide_id: str,
    user_id: str = Depends(get_current_user_id),
    service: StudyGuideService = Depends(get_study_guide_service),
):
    return ok(dump(StudyGuideOut, service.get_for_viewer(guide_id, user_id)))


@router.post("/{guide_id}/publish")
async def publish_study_guide(
    guide_id: str,
    user_id: str = Depends(get_current_user_id),
    service: StudyGuideService = Depends(get_study_guide_service),
):
    guide = service.publish(guide_id, user_id)
    return ok({"guide": dump(StudyGuideOut, guide)})


@router.delete("/{guide_id}")
async def delete_study_guide(
    guide_id: str,
    request: Request,
    body: Optional[OwnerBody] = Body(None),
    service: StudyGuideService = Depends(get_study_guide_service),
):
    user_id = resolve_identity(request, body.user_id if body else None)
    if user_id is None:
        raise Unauthenticated()
    service.delete(guide_id, user_id)
    return ok()
