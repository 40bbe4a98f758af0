from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # student details

    id = Column(Integer, primary_key=True, index=True)                               # student ID (Primary Key)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    promotion_id = Column(Integer, ForeignKey("promotions.id"), nullable=False, index=True)  # cohort
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
