import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import AdminOnly, CurrentUser, Role, get_current_user
from models.professors import Professor as ProfessorModel, ProfessorSubject
from models.profiles import Profile
from models.subjects import Subject as SubjectModel
from schemas.professors import Professor as ProfessorSchema, ProfessorCreate
from schemas.subjects import Subject as SubjectSchema

router = APIRouter(prefix="/professors", tags=["professors"])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, professor_id: int) -> ProfessorModel:
    professor = db.query(ProfessorModel).filter(ProfessorModel.id == professor_id).first()
    if professor is None:
        raise HTTPException(status_code=404, detail="Professor not found")
    return professor


def _check_profile(db: Session, user_id: int):
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    if profile.role != Role.PROFESSOR.value:
        raise HTTPException(status_code=422, detail="Profile is not a professor account")


# ==========================================================
# [1] CRUD
# ==========================================================

@router.get("/")
def read_professors(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    records = db.query(ProfessorModel).order_by(ProfessorModel.lastname.asc(), ProfessorModel.name.asc()).all()
    return {"success": True, "data": [ProfessorSchema.model_validate(r) for r in records]}


@router.get("/{professor_id}")
def read_professor(professor_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return {"success": True, "data": ProfessorSchema.model_validate(_get_or_404(db, professor_id))}


@router.post("/", status_code=201)
def create_professor(payload: ProfessorCreate, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    _check_profile(db, payload.user_id)
    professor = ProfessorModel(**payload.model_dump())
    db.add(professor)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Profile already has a professor record")
    db.refresh(professor)
    logger.info("professor created: id=%s user=%s", professor.id, professor.user_id)
    return {"success": True, "data": ProfessorSchema.model_validate(professor)}


@router.put("/{professor_id}")
def update_professor(
    professor_id: int,
    payload: ProfessorCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    professor = _get_or_404(db, professor_id)
    _check_profile(db, payload.user_id)
    for key, value in payload.model_dump().items():
        setattr(professor, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Profile already has a professor record")
    db.refresh(professor)
    return {"success": True, "data": ProfessorSchema.model_validate(professor)}


@router.delete("/{professor_id}")
def delete_professor(professor_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    professor = _get_or_404(db, professor_id)
    db.query(ProfessorSubject).filter(ProfessorSubject.professor_id == professor_id).delete()
    db.delete(professor)
    db.commit()
    logger.info("professor deleted: id=%s", professor_id)
    return {"success": True, "data": {"professor_id": professor_id, "message": "Professor deleted successfully"}}


# ==========================================================
# [2] Teaching assignments
# ==========================================================

@router.get("/{professor_id}/subjects")
def read_assigned_subjects(professor_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    _get_or_404(db, professor_id)
    records = (
        db.query(SubjectModel)
        .join(ProfessorSubject, ProfessorSubject.subject_id == SubjectModel.id)
        .filter(ProfessorSubject.professor_id == professor_id)
        .order_by(SubjectModel.name.asc())
        .all()
    )
    return {"success": True, "data": [SubjectSchema.model_validate(r) for r in records]}


@router.post("/{professor_id}/subjects/{subject_id}", status_code=201)
def assign_subject(
    professor_id: int,
    subject_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    _get_or_404(db, professor_id)
    if db.query(SubjectModel).filter(SubjectModel.id == subject_id).first() is None:
        raise HTTPException(status_code=404, detail="Subject not found")

    db.add(ProfessorSubject(professor_id=professor_id, subject_id=subject_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Subject already assigned to this professor")
    logger.info("subject %s assigned to professor %s", subject_id, professor_id)
    return {"success": True, "data": {"professor_id": professor_id, "subject_id": subject_id}}


@router.delete("/{professor_id}/subjects/{subject_id}")
def unassign_subject(
    professor_id: int,
    subject_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    assignment = (
        db.query(ProfessorSubject)
        .filter(ProfessorSubject.professor_id == professor_id, ProfessorSubject.subject_id == subject_id)
        .first()
    )
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    db.delete(assignment)
    db.commit()
    return {"success": True, "data": {"professor_id": professor_id, "subject_id": subject_id, "message": "Assignment removed"}}
