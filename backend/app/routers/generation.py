"""Study guide generation and exam grading from uploaded documents."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, require_role
from app.database import get_db
from app.dependencies import get_completion_client, get_content_processor
from app.llm import CompletionClient
from app.models import UserType
from app.responses import created
from app.schemas import GradingResultOut, StudyGuideOut, dump
from app.services import ExamGrader, StudyGuideGenerator
from processor.service import ContentProcessor
from app.routers.uploads import read_uploads

router = APIRouter(tags=["Generation"])


@router.post("/generate-study-guide", status_code=201)
async def generate_study_guide(
    files: Optional[List[UploadFile]] = File(None),
    study_guide_name: Optional[str] = Form(None, alias="studyGuideName"),
    subject: Optional[str] = Form(None),
    grade_level: Optional[str] = Form(None, alias="gradeLevel"),
    format: Optional[str] = Form(None),
    topic_focus: Optional[str] = Form(None, alias="topicFocus"),
    difficulty_level: Optional[str] = Form(None, alias="difficultyLevel"),
    additional_instructions: Optional[str] = Form(None, alias="additionalInstructions"),
    class_name: Optional[str] = Form(None, alias="className"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    processor: ContentProcessor = Depends(get_content_processor),
):
    """Turn uploaded course material into a saved, unpublished study guide."""
    batch = await read_uploads(files or [])
    guide = await StudyGuideGenerator(db, client, processor).generate(
        user_id,
        batch,
        title=study_guide_name,
        subject=subject,
        grade_level=grade_level,
        format=format,
        topic_focus=topic_focus,
        difficulty_level=difficulty_level,
        additional_instructions=additional_instructions,
        class_name=class_name,
    )
    data = dump(StudyGuideOut, guide)
    data["studyGuideUrl"] = f"/study-guide/{guide.id}"
    return created(data, message="Study guide generated successfully")


@router.post("/grade-exam", status_code=201)
async def grade_exam(
    mark_scheme: Optional[UploadFile] = File(None, alias="markScheme"),
    student_exam: Optional[UploadFile] = File(None, alias="studentExam"),
    student_first_name: Optional[str] = Form(None, alias="studentFirstName"),
    student_last_name: Optional[str] = Form(None, alias="studentLastName"),
    student_name: Optional[str] = Form(None, alias="studentName"),
    student_user_id: Optional[str] = Form(None, alias="studentUserId"),
    exam_title: Optional[str] = Form(None, alias="examTitle"),
    class_name: Optional[str] = Form(None, alias="className"),
    class_period: Optional[str] = Form(None, alias="classPeriod"),
    additional_comments: Optional[str] = Form(None, alias="additionalComments"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    processor: ContentProcessor = Depends(get_content_processor),
):
    """Grade a student's exam against a mark scheme and record the result."""
    require_role(db, user_id, UserType.teacher)
    scheme = (await read_uploads([mark_scheme]))[0] if mark_scheme else None
    exam = (await read_uploads([student_exam]))[0] if student_exam else None
    details = {
        "student_first_name": student_first_name,
        "student_last_name": student_last_name,
        "student_name": student_name,
        "student_user_id": student_user_id,
        "exam_title": exam_title,
        "class_name": class_name,
        "class_period": class_period,
        "additional_comments": additional_comments,
    }
    result = await ExamGrader(db, client, processor).grade(user_id, scheme, exam, details)
    return created(dump(GradingResultOut, result), message="Exam graded successfully")
