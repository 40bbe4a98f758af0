from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from schemas.grade_categories import WeightBalance
from services.grading import GradeStatus


class CategoryStatsOut(BaseModel):
    category_id: int
    name: str
    weight: float
    average: float
    min: float
    max: float
    total_grades: int

    class Config:
        from_attributes = True


class StudentSummaryOut(BaseModel):
    rank: int
    student_id: int
    student_name: str
    email: Optional[str] = None
    category_grades: Dict[int, Optional[float]]
    final_grade: float
    status: GradeStatus
    completed_categories: int
    total_categories: int


class ClassStatsOut(BaseModel):
    total_students: int
    students_with_grades: int
    class_average: float
    highest_grade: float
    lowest_grade: float
    pass_rate: float


class OverviewOut(BaseModel):
    subject_id: int
    promotion_id: int
    categories: List[CategoryStatsOut]
    students: List[StudentSummaryOut]
    statistics: ClassStatsOut
    weights: WeightBalance


class CategoryBreakdownOut(BaseModel):
    category_id: int
    name: str
    weight: float
    value: Optional[float] = None
    comments: Optional[str] = None
    updated_at: Optional[datetime] = None


class SubjectGradeOut(BaseModel):
    student_id: int
    subject_id: int
    promotion_id: int
    final_grade: float
    status: GradeStatus
    completed_categories: int
    total_categories: int
    last_updated: Optional[datetime] = None
    categories: List[CategoryBreakdownOut]
    weights: WeightBalance


class SubjectProgressOut(BaseModel):
    subject_id: int
    subject_name: str
    subject_code: Optional[str] = None
    final_grade: float
    status: GradeStatus
    total_categories: int
    completed_categories: int
    last_updated: Optional[datetime] = None


class ProgressStatsOut(BaseModel):
    total_subjects: int
    completed_subjects: int
    average_grade: float
    highest_grade: float
    lowest_grade: float


class ProgressOut(BaseModel):
    student_id: int
    promotion_id: int
    subjects: List[SubjectProgressOut]
    statistics: ProgressStatsOut


class HistoryItemOut(BaseModel):
    id: int
    subject_id: int
    subject_name: str
    subject_code: Optional[str] = None
    promotion_id: int
    promotion_name: str
    promotion_year: int
    category_name: str
    value: float
    weight: float
    status: GradeStatus
    comments: Optional[str] = None
    recorded_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
