from fastapi import APIRouter

from config.settings import settings
from services.grading import FULL_WEIGHT, STATUS_THRESHOLDS, GradeStatus

router = APIRouter(prefix="/meta", tags=["Meta"])


# ✅ grading rules the frontend needs to render badges and the weight banner
@router.get("/grading")
def grading_rules():
    return {
        "success": True,
        "data": {
            "status_thresholds": [{"status": s.value, "min_grade": bound} for bound, s in STATUS_THRESHOLDS],
            "fallback_status": GradeStatus.FAILING.value,
            "no_grades_status": GradeStatus.INCOMPLETE.value,
            "full_weight": FULL_WEIGHT,
            "weight_tolerance": settings.WEIGHT_TOLERANCE,
            "passing_grade": settings.PASSING_GRADE,
            "missing_grade_policy": settings.MISSING_GRADE_POLICY,
        },
    }
