from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

# ✅ input (POST/PUT)
class PromotionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)           # e.g. "2024A AM"
    cohort_code: str = Field(..., min_length=1, max_length=20)     # e.g. "2024A"
    entry_year: int = Field(..., ge=2000, le=2100)
    graduation_year: int = Field(..., ge=2000, le=2100)
    shift: Literal["AM", "PM"]
    active: bool = True

    @model_validator(mode="after")
    def _check_years(self):
        if self.graduation_year < self.entry_year:
            raise ValueError("graduation_year must not be before entry_year")
        return self

# ✅ output
class Promotion(PromotionCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
