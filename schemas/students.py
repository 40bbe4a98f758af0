from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# ✅ input (POST/PUT)
class StudentCreate(BaseModel):
    user_id: int                                            # profile of the student
    name: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    promotion_id: int                                       # cohort

# ✅ output
class Student(StudentCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
