"""Short-answer scoring through the completion service."""
import logging
import re
from dataclasses import dataclass, asdict

from ..errors import InvalidInput, UpstreamParseError
from ..llm import CompletionClient
from ..schemas import ScoreRequest

logger = logging.getLogger(__name__)

CORRECT_THRESHOLD = 80
MAX_TOKENS = 500
TEMPERATURE = 0.3

SCORE_RE = re.compile(r"SCORE:\s*(\d+)", re.IGNORECASE)
FEEDBACK_RE = re.compile(r"FEEDBACK:\s*(.+?)(?:\n\n|$)", re.IGNORECASE | re.DOTALL)

PROMPT_TEMPLATE = """You are grading a short answer question for a {subject} study guide quiz.

Question: {question}

Sample Answer (what we're looking for): {sample_answer}

Student's Answer: {student_answer}

Evaluate the student's answer and provide:
1. A score from 0-100 (80+ is correct, 50-79 is partial credit, below 50 is incorrect)
2. Brief constructive feedback (1-2 sentences)

Your response MUST follow this EXACT format:
SCORE: [number 0-100]
FEEDBACK: [your feedback here]

Be fair but reasonable. If the student captures the key concepts from the sample answer, give credit even if the wording differs. Focus on understanding, not exact phrasing."""


@dataclass
class ScoreResult:
    score: int
    feedback: str
    isCorrect: bool

    def to_dict(self) -> dict:
        return asdict(self)


def build_prompt(question: str, sample_answer: str, student_answer: str, subject: str) -> str:
    return PROMPT_TEMPLATE.format(
        subject=subject,
        question=question,
        sample_answer=sample_answer,
        student_answer=student_answer,
    )


def parse_score_response(text: str) -> ScoreResult:
    """Extract ``SCORE:`` and ``FEEDBACK:`` from a model reply.

    Raises UpstreamParseError when either is missing or the score is outside 0..100.
    """
    score_match = SCORE_RE.search(text or "")
    feedback_match = FEEDBACK_RE.search(text or "")
    if not score_match or not feedback_match:
        logger.error(f"Failed to parse scoring response: {text!r}")
        raise UpstreamParseError("Failed to parse scoring response")

    score = int(score_match.group(1))
    if not 0 <= score <= 100:
        logger.error(f"Scoring response out of range: {score}")
        raise UpstreamParseError("Failed to parse scoring response")

    feedback = feedback_match.group(1).strip()
    return ScoreResult(score=score, feedback=feedback, isCorrect=score >= CORRECT_THRESHOLD)


class ShortAnswerScorer:
    def __init__(self, client: CompletionClient):
        self.client = client

    def score(self, request: ScoreRequest) -> ScoreResult:
        fields = {
            "question": request.question,
            "sampleAnswer": request.sample_answer,
            "studentAnswer": request.student_answer,
            "subject": request.subject,
        }
        missing = [name for name, value in fields.items() if not (value or "").strip()]
        if missing:
            raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

        prompt = build_prompt(
            request.question.strip(),
            request.sample_answer.strip(),
            request.student_answer.strip(),
            request.subject.strip(),
        )
        reply = self.client.complete(prompt, max_tokens=MAX_TOKENS, temperature=TEMPERATURE)
        return parse_score_response(reply)
