from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# ✅ input (POST/PUT)
class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)   # subject name
    code: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = None
    year: int = Field(..., ge=1)                            # study year
    semester: int = Field(..., ge=1, le=2)

# ✅ output
class Subject(SubjectCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
