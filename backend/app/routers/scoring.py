"""Short-answer scoring through the completion service."""
from fastapi import APIRouter, Depends

from app.dependencies import get_completion_client
from app.llm import CompletionClient
from app.responses import ok
from app.schemas import ScoreRequest
from app.services import ShortAnswerScorer

router = APIRouter(tags=["Scoring"])


@router.post("/score-short-answer")
async def score_short_answer(
    payload: ScoreRequest,
    client: CompletionClient = Depends(get_completion_client),
):
    """Score a student's answer against a sample answer on a 0-100 scale."""
    result = ShortAnswerScorer(client).score(payload)
    return ok(result.to_dict())
