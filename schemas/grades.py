from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# ✅ upsert body: one entry per (student, category)
class GradeUpsert(BaseModel):
    student_id: int
    category_id: int
    value: float = Field(..., ge=0, le=100)                 # score
    comments: Optional[str] = None

# ✅ output
class Grade(BaseModel):
    id: int
    student_id: int
    category_id: int
    value: float
    comments: Optional[str] = None
    editor_id: Optional[int] = None
    recorded_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
