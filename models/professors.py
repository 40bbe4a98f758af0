from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from database.db import Base

class Professor(Base):
    __tablename__ = "professors"  # professor details

    id = Column(Integer, primary_key=True, index=True)                        # professor ID (Primary Key)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    specialty = Column(String(100), nullable=False)                           # field (e.g. Physics)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class ProfessorSubject(Base):
    __tablename__ = "professor_subjects"  # teaching assignments
    __table_args__ = (UniqueConstraint("professor_id", "subject_id", name="uq_professor_subject"),)

    id = Column(Integer, primary_key=True, index=True)
    professor_id = Column(Integer, ForeignKey("professors.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
