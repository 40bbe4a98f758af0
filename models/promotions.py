from sqlalchemy import Boolean, Column, Integer, String, DateTime, func
from database.db import Base

class Promotion(Base):
    __tablename__ = "promotions"  # cohorts (e.g. "2024A AM")

    id = Column(Integer, primary_key=True, index=True)                       # cohort ID (Primary Key)
    name = Column(String(100), nullable=False)                               # display name
    cohort_code = Column(String(20), nullable=False, unique=True, index=True) # e.g. 2024A
    entry_year = Column(Integer, nullable=False)                             # admission year
    graduation_year = Column(Integer, nullable=False)                        # expected graduation year
    shift = Column(String(2), nullable=False)                                # AM / PM
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
