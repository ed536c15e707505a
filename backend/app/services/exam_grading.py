"""Exam grading through the completion service.

The mark scheme and the student's exam are sent as extracted text and, for
PDFs, as rendered page images (student exams are often handwritten). The
reply is parsed into a per-question breakdown and saved as a grading result.
"""
import io
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from processor.adapters import ContentProcessingError
from processor.rasterizer import convert_pdf_to_images
from processor.service import ContentProcessor
from ..errors import InvalidInput, ProcessingError, UpstreamParseError
from ..llm import CompletionClient
from ..models import GradingResult
from ..schemas import GradeBreakdownItem, GradingResultCreate
from .grading import GradingService
from .students import StudentService

logger = logging.getLogger(__name__)

MAX_TOKENS = 8000
TEMPERATURE = 0.3
MAX_PAGES_PER_FILE = 10
MAX_EXPLANATION_LENGTH = 500

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_EXTENSIONS = {".pdf": PDF_TYPE, ".docx": DOCX_TYPE}

UNREADABLE_MARKERS = ("cannot read", "cannot see", "please share", "could you please provide")

QUESTION_HEADER_RE = re.compile(r"Question\s*(\d+)\s*-\s*[^(]+\(Total:\s*(\d+)", re.IGNORECASE)
SUB_QUESTION_RE = re.compile(r"(\d+(?:\([a-z]+\))*)\s*-\s*", re.IGNORECASE)
LINE_START_QUESTION_RE = re.compile(r"^(\d+(?:\([a-z]+\))*)[\s\-]", re.IGNORECASE)
MARK_RE = re.compile(r"Mark:\s*(\d+)\s*/\s*(\d+)\s*-\s*(.+)", re.IGNORECASE)
CONTINUATION_STOP_RE = re.compile(r"Mark:|Question|Total|^\d+[()]")
SEPARATOR_RE = re.compile(r"^[-=*#\s]+$")
STRUCTURED_RE = re.compile(
    r"QUESTION:\s*(.+?)\s*MARKS_AWARDED:\s*(\d+)\s*MARKS_POSSIBLE:\s*(\d+)\s*EXPLANATION:\s*(.+?)(?=QUESTION:|$)",
    re.IGNORECASE | re.DOTALL,
)
TOTAL_PATTERNS = [
    re.compile(r"Total\s+(?:Mark|Marks)?[:\s]+(\d+)\s*/\s*(\d+)", re.IGNORECASE),
    re.compile(r"Overall.*?(\d+)\s*/\s*(\d+)\s*(?:marks?|points?)", re.IGNORECASE),
    re.compile(r"Total.*?(\d+)\s*/\s*(\d+)\s*(?:marks?|points?)", re.IGNORECASE),
    re.compile(r"(\d+)\s*/\s*(\d+)\s*(?:marks?|points?)\s*\([^)]*%\)", re.IGNORECASE),
]
QUESTION_TOTAL_RE = re.compile(r"Question\s+\d+\s+Total[:\s]+(\d+)\s*/\s*(\d+)", re.IGNORECASE)

PROMPT_TEMPLATE = """You are an experienced examiner. Grade the student's exam strictly against the mark scheme.

{image_note}

MARK SCHEME ({mark_scheme_name}):
{mark_scheme_text}

STUDENT EXAM ({student_exam_name}):
{student_exam_text}

For every question, start with a header line:
Question [number] - [topic] (Total: [marks] marks)

Then, for every part of the question, write one line in this EXACT format:
[part number, e.g. 1(a)(i)] - Mark: [awarded]/[possible] - [short explanation citing the mark scheme]

Finish with a single line:
Total Marks: [awarded]/[possible]

Award marks only for what the student actually wrote. If a page is hard to read, grade what is legible."""


def clean_explanation(text: str) -> str:
    return " ".join(text.split())[:MAX_EXPLANATION_LENGTH]


def parse_grading_breakdown(content: str) -> List[GradeBreakdownItem]:
    """Per-question marks from a grading reply.

    ``Mark: X/Y - explanation`` lines are attributed to the nearest question
    label above them. Replies in the ``QUESTION:/MARKS_AWARDED:`` layout are
    read as a fallback.
    """
    breakdown = []
    lines = content.split("\n")
    question = "1"
    for i, line in enumerate(lines):
        mark = MARK_RE.search(line)
        # question labels only count ahead of the marks
        label_text = line[:mark.start()] if mark else line
        header = QUESTION_HEADER_RE.search(label_text)
        if header:
            question = header.group(1)
        sub = SUB_QUESTION_RE.search(label_text)
        if sub:
            question = sub.group(1)
        line_start = LINE_START_QUESTION_RE.match(label_text)
        if line_start and not mark:
            question = line_start.group(1)

        if not mark:
            continue
        explanation = mark.group(3).strip()
        if len(explanation) < 50:
            # short explanations may continue on the next two lines
            for follow in lines[i + 1:i + 3]:
                if CONTINUATION_STOP_RE.search(follow):
                    break
                if follow.strip() and not SEPARATOR_RE.match(follow):
                    explanation += " " + follow.strip()
        breakdown.append(GradeBreakdownItem(
            question_number=question,
            marks_awarded=int(mark.group(1)),
            marks_possible=int(mark.group(2)),
            explanation=clean_explanation(explanation),
        ))

    if not breakdown:
        for match in STRUCTURED_RE.finditer(content):
            breakdown.append(GradeBreakdownItem(
                question_number=match.group(1).strip(),
                marks_awarded=int(match.group(2)),
                marks_possible=int(match.group(3)),
                explanation=clean_explanation(match.group(4)),
            ))
    return breakdown


def extract_totals(content: str, breakdown: List[GradeBreakdownItem]) -> Tuple[int, int]:
    """Overall ``(awarded, possible)`` for a grading reply.

    Starts from the breakdown sums. A stated total replaces them when it
    covers more marks than the breakdown found. Per-question totals are
    summed as a last resort.
    """
    total = int(sum(item.marks_awarded for item in breakdown))
    possible = int(sum(item.marks_possible for item in breakdown))

    for pattern in TOTAL_PATTERNS:
        match = pattern.search(content)
        if match:
            found_total, found_possible = int(match.group(1)), int(match.group(2))
            if found_possible > possible:
                total, possible = found_total, found_possible
                break

    if possible == 0:
        question_totals = [(int(a), int(p)) for a, p in QUESTION_TOTAL_RE.findall(content)]
        if question_totals:
            total = sum(a for a, _ in question_totals)
            possible = sum(p for _, p in question_totals)
    return total, possible


def is_unreadable_reply(content: str) -> bool:
    lowered = content.lower()
    return any(marker in lowered for marker in UNREADABLE_MARKERS)


def build_grading_prompt(
    mark_scheme_name: str,
    mark_scheme_text: str,
    student_exam_name: str,
    student_exam_text: str,
    mark_scheme_pages: int = 0,
    student_exam_pages: int = 0,
) -> str:
    if mark_scheme_pages or student_exam_pages:
        image_note = (
            f"The first {mark_scheme_pages} image(s) are pages of the mark scheme and the next "
            f"{student_exam_pages} image(s) are pages of the student's exam. Read the images when the "
            f"extracted text below is missing or incomplete."
        )
    else:
        image_note = "Both documents are provided as extracted text."
    return PROMPT_TEMPLATE.format(
        image_note=image_note,
        mark_scheme_name=mark_scheme_name,
        mark_scheme_text=mark_scheme_text or "(no text could be extracted)",
        student_exam_name=student_exam_name,
        student_exam_text=student_exam_text or "(no text could be extracted)",
    )


def resolve_file_type(label: str, filename: str, content_type: Optional[str]) -> str:
    """PDF or DOCX content type for an upload, judged by its declared type or extension."""
    if content_type in (PDF_TYPE, DOCX_TYPE):
        return content_type
    extension = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension in ALLOWED_EXTENSIONS:
        return ALLOWED_EXTENSIONS[extension]
    raise InvalidInput(f"Invalid {label} file type: {content_type or 'unknown'}. Please upload a PDF or DOCX file.")


class ExamGrader:
    def __init__(self, db: Session, client: CompletionClient, processor: ContentProcessor):
        self.db = db
        self.client = client
        self.processor = processor

    async def _read(self, filename: str, data: bytes, file_type: str) -> Tuple[str, List[Dict[str, Any]]]:
        try:
            result = await self.processor.process_file(io.BytesIO(data), filename)
            images = []
            if file_type == PDF_TYPE:
                images = await convert_pdf_to_images(data, max_pages=MAX_PAGES_PER_FILE, filename=filename)
        except ContentProcessingError as e:
            logger.error(f"Could not read {filename}: {e}", exc_info=True)
            raise ProcessingError(f"Failed to process {filename}: {e}") from e
        return result["content"].strip(), images

    async def grade(
        self,
        teacher_id: str,
        mark_scheme: Optional[Tuple[str, bytes, Optional[str]]],
        student_exam: Optional[Tuple[str, bytes, Optional[str]]],
        details: Dict[str, Optional[str]],
    ) -> GradingResult:
        """Grade ``student_exam`` against ``mark_scheme`` and record the result.

        ``details`` carries the optional student and exam fields of
        ``GradingResultCreate`` (student names, ``student_user_id``,
        ``exam_title``, ``class_name``, ``class_period``, ``additional_comments``).
        """
        if not mark_scheme or not student_exam:
            raise InvalidInput("Both mark scheme and student exam PDFs are required")
        scheme_name, scheme_data, scheme_type = mark_scheme
        exam_name, exam_data, exam_type = student_exam
        scheme_type = resolve_file_type("mark scheme", scheme_name, scheme_type)
        exam_type = resolve_file_type("student exam", exam_name, exam_type)
        if details.get("student_user_id"):
            StudentService(self.db).ensure_my_student(teacher_id, details["student_user_id"])

        scheme_text, scheme_images = await self._read(scheme_name, scheme_data, scheme_type)
        exam_text, exam_images = await self._read(exam_name, exam_data, exam_type)

        prompt = build_grading_prompt(
            scheme_name,
            scheme_text,
            exam_name,
            exam_text,
            mark_scheme_pages=len(scheme_images),
            student_exam_pages=len(exam_images),
        )
        logger.info(
            f"Grading {exam_name} against {scheme_name} "
            f"({len(scheme_images)} + {len(exam_images)} page image(s))"
        )
        reply = self.client.complete(
            prompt,
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
            images=scheme_images + exam_images,
            error_message="Failed to grade exam",
        )

        if is_unreadable_reply(reply):
            logger.error(f"Grading reply says the documents could not be read: {reply[:200]}")
            raise UpstreamParseError(
                "Failed to process the exam PDFs. Please try again, or ensure your PDFs are clear and readable."
            )

        breakdown = parse_grading_breakdown(reply)
        total, possible = extract_totals(reply, breakdown)
        if possible <= 0 or total > possible:
            logger.error(f"Could not read totals from grading reply ({total}/{possible})")
            raise UpstreamParseError("Failed to parse grading response")
        logger.info(f"Parsed {len(breakdown)} breakdown item(s), total {total}/{possible}")

        try:
            payload = GradingResultCreate(
                **{k: v for k, v in details.items() if v},
                total_marks=total,
                total_possible_marks=possible,
                grade_breakdown=breakdown,
                content=reply,
                answer_sheet_filename=scheme_name,
                student_exam_filename=exam_name,
            )
        except ValidationError as e:
            raise UpstreamParseError("Failed to parse grading response") from e
        return GradingService(self.db).create_result(teacher_id, payload)
