from sqlalchemy import Column, Integer, Float, Text, DateTime, ForeignKey, UniqueConstraint, func
from database.db import Base

class Grade(Base):
    __tablename__ = "grades"  # one entry per (student, category), updated in place
    __table_args__ = (UniqueConstraint("student_id", "category_id", name="uq_grade_student_category"),)

    id = Column(Integer, primary_key=True, index=True)                  # grade ID (Primary Key)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("grade_categories.id", ondelete="CASCADE"), nullable=False, index=True)
    value = Column(Float, nullable=False)                               # score in [0, 100]
    comments = Column(Text)
    editor_id = Column(Integer, ForeignKey("profiles.id"))              # last profile that wrote the value
    recorded_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
