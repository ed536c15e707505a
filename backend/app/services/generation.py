"""Study guide generation: uploaded material in, saved draft guide out."""
import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from processor.adapters import ContentProcessingError
from processor.service import ContentProcessor
from ..errors import InvalidInput, ProcessingError
from ..llm import CompletionClient
from ..models import GuideFormat, StudyGuide
from ..schemas import StudyGuideCreate
from .study_guides import StudyGuideService

logger = logging.getLogger(__name__)

MAX_TOKENS = 4000
TEMPERATURE = 0.7

REQUIRED_FIELDS_MESSAGE = "Missing required fields: studyGuideName, subject, gradeLevel, format"

FORMAT_INSTRUCTIONS = {
    GuideFormat.outline: (
        "Create a detailed hierarchical outline with main topics, subtopics, and key points. "
        "Use clear numbering and indentation."
    ),
    GuideFormat.flashcards: (
        "Create question-answer pairs suitable for flashcards. Include both factual questions "
        'and conceptual questions. Format as "Q: [question] A: [answer]"'
    ),
    GuideFormat.quiz: (
        "Create a comprehensive quiz with multiple choice, true/false, and short answer questions. "
        "Include an answer key at the end."
    ),
    GuideFormat.summary: (
        "Create a comprehensive summary that captures all key concepts, main ideas, and important "
        "details in a flowing narrative format."
    ),
    GuideFormat.custom: (
        "Organize the material in whatever structure best fits the style requirements below. "
        "Use clear headings so the guide is easy to scan."
    ),
}

DIFFICULTY_INSTRUCTIONS = {
    "beginner": (
        "Use simple language and basic concepts. Focus on fundamental understanding "
        "and provide clear explanations."
    ),
    "intermediate": (
        "Use moderate complexity with some advanced concepts. Balance foundational knowledge "
        "with deeper understanding."
    ),
    "advanced": (
        "Use sophisticated language and complex concepts. Focus on deep understanding, "
        "critical thinking, and application."
    ),
}

PROMPT_TEMPLATE = """You are an expert educational content creator specializing in creating study guides for {grade_level} students.

TASK: Create a study guide based on the extracted content from the uploaded materials. Work with whatever text was successfully extracted, even if incomplete.

SUBJECT: {subject}
GRADE LEVEL: {grade_level}
FORMAT: {format}
{optional}
{format_instructions}
{difficulty_instructions}

COURSE MATERIALS TO ANALYZE:
{content}

Create a well-structured study guide that:
1. Extracts and organizes key concepts from the provided materials
2. Is appropriate for {grade_level} students
3. Follows the {format} format exactly
4. Uses examples and information from the provided materials when available
5. Provides additional study guidance when specific content is insufficient

Make sure the study guide is ready for students to use immediately for studying and review."""


def build_study_guide_prompt(
    content: str,
    subject: str,
    grade_level: str,
    format: GuideFormat,
    topic_focus: Optional[str] = None,
    difficulty_level: Optional[str] = None,
    additional_instructions: Optional[str] = None,
) -> str:
    optional = []
    if topic_focus:
        optional.append(f"TOPIC FOCUS: {topic_focus}")
    if difficulty_level:
        optional.append(f"DIFFICULTY LEVEL: {difficulty_level}")
    if additional_instructions:
        optional.append(f"STYLE REQUIREMENTS: {additional_instructions}")

    return PROMPT_TEMPLATE.format(
        grade_level=grade_level,
        subject=subject,
        format=format.value,
        optional="\n".join(optional),
        format_instructions=FORMAT_INSTRUCTIONS[format],
        difficulty_instructions=DIFFICULTY_INSTRUCTIONS.get((difficulty_level or "").lower(), ""),
        content=content,
    )


def combine_contents(processed: List[dict]) -> str:
    return "\n\n".join(f"--- {item['name']} ---\n{item['content']}" for item in processed)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class StudyGuideGenerator:
    """Extract text from the uploads, ask the completion service for a guide and save it."""

    def __init__(self, db: Session, client: CompletionClient, processor: ContentProcessor):
        self.db = db
        self.client = client
        self.processor = processor

    async def generate(
        self,
        user_id: str,
        files: List[Tuple[str, bytes, Optional[str]]],
        title: Optional[str],
        subject: Optional[str],
        grade_level: Optional[str],
        format: Optional[str],
        topic_focus: Optional[str] = None,
        difficulty_level: Optional[str] = None,
        additional_instructions: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> StudyGuide:
        if not files:
            raise InvalidInput("No files provided")
        if any(_blank(v) for v in (title, subject, grade_level, format)):
            raise InvalidInput(REQUIRED_FIELDS_MESSAGE)
        try:
            guide_format = GuideFormat(format.strip())
        except ValueError:
            raise InvalidInput(f"Invalid format: {format}") from None

        try:
            draft = StudyGuideCreate(
                title=title,
                subject=subject,
                grade_level=grade_level,
                format=guide_format,
                content="",
                topic_focus=topic_focus or None,
                difficulty_level=difficulty_level or None,
                additional_instructions=additional_instructions or None,
                class_name=class_name or None,
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = error["loc"][-1] if error["loc"] else "body"
            raise InvalidInput(f"{field}: {error['msg']}") from None

        try:
            processed = await self.processor.process_batch(files)
        except ContentProcessingError as e:
            logger.error(f"File processing failed: {e}", exc_info=True)
            raise ProcessingError(f"Failed to process files: {e}") from e

        prompt = build_study_guide_prompt(
            combine_contents(processed),
            draft.subject,
            draft.grade_level,
            guide_format,
            topic_focus=draft.topic_focus,
            difficulty_level=draft.difficulty_level,
            additional_instructions=draft.additional_instructions,
        )
        logger.info(f"Generating {guide_format.value} study guide from {len(processed)} file(s), prompt {len(prompt)} chars")
        text = self.client.complete(
            prompt,
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
            error_message="Failed to generate study guide",
        )

        payload = draft.model_copy(update={"content": text, "file_count": len(processed)})
        return StudyGuideService(self.db).create(user_id, payload)
