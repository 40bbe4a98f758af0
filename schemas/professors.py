from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

class ProfessorCreate(BaseModel):
    user_id: int                                            # profile of the professor
    name: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    specialty: str = Field(..., min_length=1, max_length=100)

class Professor(ProfessorCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
