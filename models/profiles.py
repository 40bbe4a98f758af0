from sqlalchemy import Column, Integer, String, DateTime, func
from database.db import Base

class Profile(Base):
    __tablename__ = "profiles"  # accounts mirrored from the hosted auth service

    id = Column(Integer, primary_key=True, index=True)                  # profile ID (Primary Key)
    email = Column(String(255), nullable=False, unique=True, index=True) # login email
    role = Column(String(20), nullable=False)                           # admin / professor / student
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
