"""API routers, one per collection or feature."""

from .flashcards import router as flashcards_router
from .follows import router as follows_router
from .generation import router as generation_router
from .grade_reports import router as grade_reports_router
from .grading_results import router as grading_results_router
from .my_students import router as my_students_router
from .scoring import router as scoring_router
from .sharing import router as sharing_router
from .student_classes import router as student_classes_router
from .students import router as students_router
from .study_guides import router as study_guides_router
from .teachers import router as teachers_router
from .uploads import router as uploads_router

all_routers = [
    flashcards_router,
    follows_router,
    generation_router,
    grade_reports_router,
    grading_results_router,
    my_students_router,
    scoring_router,
    sharing_router,
    student_classes_router,
    students_router,
    study_guides_router,
    teachers_router,
    uploads_router,
]
