from dataclasses import dataclass
from enum import Enum
from typing import Optional, Annotated
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session
from config.settings import settings
from database.db import get_db
from models.professors import Professor, ProfessorSubject
from models.profiles import Profile
from models.students import Student
import hmac
import logging

logger = logging.getLogger(__name__)

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
UserIdHeader = Annotated[Optional[int], Header(alias="X-User-Id")]


class Role(str, Enum):
    ADMIN = "admin"
    PROFESSOR = "professor"
    STUDENT = "student"


@dataclass(frozen=True)
class CurrentUser:
    profile_id: int
    email: str
    role: Role


def require_api_token(authorization: AuthHeader = None):
    if not settings.API_TOKEN:
        raise HTTPException(status_code=500, detail="Server token not configured")

    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # "Bearer <token>"
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid auth scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # timing-safe comparison
    if not hmac.compare_digest(token.strip(), settings.API_TOKEN):
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    user_id: UserIdHeader = None,
    _: None = Depends(require_api_token),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """The acting user arrives with every request; nothing is kept between requests."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile is None:
        raise HTTPException(status_code=401, detail="Unknown user")

    try:
        role = Role(profile.role)
    except ValueError:
        logger.warning("profile %s has unsupported role %r", profile.id, profile.role)
        raise HTTPException(status_code=403, detail="Unsupported role")

    return CurrentUser(profile_id=profile.id, email=profile.email, role=role)


def require_roles(*roles: Role):
    allowed = set(roles)

    def _dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient role")
        return user

    return _dependency


AdminOnly = require_roles(Role.ADMIN)
Staff = require_roles(Role.ADMIN, Role.PROFESSOR)


def ensure_teaches(db: Session, user: CurrentUser, subject_id: int):
    """Professors may only manage subjects they are assigned to; admins manage all."""
    if user.role == Role.ADMIN:
        return
    if user.role != Role.PROFESSOR:
        raise HTTPException(status_code=403, detail="Insufficient role")

    assigned = (
        db.query(ProfessorSubject.id)
        .join(Professor, Professor.id == ProfessorSubject.professor_id)
        .filter(Professor.user_id == user.profile_id, ProfessorSubject.subject_id == subject_id)
        .first()
    )
    if assigned is None:
        raise HTTPException(status_code=403, detail="Subject is not assigned to this professor")


def ensure_student_access(db: Session, user: CurrentUser, student_id: int):
    """Students may only read their own records."""
    if user.role in (Role.ADMIN, Role.PROFESSOR):
        return
    own = db.query(Student.id).filter(Student.user_id == user.profile_id).first()
    if own is None or own[0] != student_id:
        raise HTTPException(status_code=403, detail="Students may only view their own grades")
