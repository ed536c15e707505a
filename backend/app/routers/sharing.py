"""Sharing a study guide link by email."""
from fastapi import APIRouter, Depends

from app.dependencies import get_email_service
from app.responses import ok
from app.schemas import ShareRequest
from app.services.sharing import EmailService, share_study_guide

router = APIRouter(tags=["Sharing"])


@router.post("/share-study-guide")
async def share_study_guide_by_email(
    payload: ShareRequest,
    email_service: EmailService = Depends(get_email_service),
):
    share_study_guide(email_service, payload)
    return ok(message="Study guide shared successfully")
