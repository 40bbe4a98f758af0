from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

class GradeCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)    # e.g. Exams
    description: Optional[str] = None
    weight: float = Field(..., gt=0, le=100)                # percentage of the final grade
    subject_id: int
    promotion_id: int

class GradeCategory(GradeCategoryCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class WeightBalance(BaseModel):
    total: float
    balanced: bool      # advisory: grade entry is never blocked on this
    missing: float
    excess: float

    class Config:
        from_attributes = True
