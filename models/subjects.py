from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # subject catalogue

    id = Column(Integer, primary_key=True, index=True)   # subject ID (Primary Key)
    name = Column(String(100), nullable=False)           # subject name (e.g. Mathematics)
    code = Column(String(20))                            # short code (e.g. MAT-101)
    description = Column(Text)
    year = Column(Integer, nullable=False)               # study year
    semester = Column(Integer, nullable=False)           # 1 or 2
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class SubjectPromotion(Base):
    __tablename__ = "subject_promotions"  # which cohorts take which subject
    __table_args__ = (UniqueConstraint("subject_id", "promotion_id", name="uq_subject_promotion"),)

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    promotion_id = Column(Integer, ForeignKey("promotions.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
