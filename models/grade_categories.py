from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, func
from database.db import Base

class GradeCategory(Base):
    __tablename__ = "grade_categories"  # weighted components of a subject/cohort grading scheme

    id = Column(Integer, primary_key=True, index=True)                  # category ID (Primary Key)
    name = Column(String(100), nullable=False)                          # e.g. Exams
    description = Column(Text)
    weight = Column(Float, nullable=False)                              # percentage in (0, 100]
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    promotion_id = Column(Integer, ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
