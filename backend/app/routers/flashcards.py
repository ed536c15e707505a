"""Flashcard progress: which cards a learner has mastered or finds difficult."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.errors import InvalidInput
from app.responses import ok
from app.schemas import FlashcardProgressUpdate
from app.services import FlashcardProgressService

router = APIRouter(prefix="/flashcard-progress", tags=["Flashcards"])

GUIDE_ID_REQUIRED = "Study guide ID is required"


def get_flashcard_service(db: Session = Depends(get_db)) -> FlashcardProgressService:
    return FlashcardProgressService(db)


@router.get("")
async def get_flashcard_progress(
    study_guide_id: Optional[str] = Query(None, alias="studyGuideId"),
    user_id: str = Depends(get_current_user_id),
    service: FlashcardProgressService = Depends(get_flashcard_service),
):
    if not study_guide_id:
        raise InvalidInput(GUIDE_ID_REQUIRED)
    return ok({"progress": service.get(study_guide_id, user_id)})


@router.post("")
async def save_flashcard_progress(
    payload: FlashcardProgressUpdate,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardProgressService = Depends(get_flashcard_service),
):
    """Record one card's status, replacing any earlier mark."""
    if not payload.study_guide_id or not payload.card_id or not payload.status:
        raise InvalidInput("Study guide ID, card ID, and status are required")
    row = service.save(payload.study_guide_id, user_id, payload.card_id, payload.status)
    return ok({"cardId": row.card_id, "status": row.status.value})


@router.delete("")
async def reset_flashcard_progress(
    study_guide_id: Optional[str] = Query(None, alias="studyGuideId"),
    user_id: str = Depends(get_current_user_id),
    service: FlashcardProgressService = Depends(get_flashcard_service),
):
    if not study_guide_id:
        raise InvalidInput(GUIDE_ID_REQUIRED)
    return ok({"deleted": service.reset(study_guide_id, user_id)})
