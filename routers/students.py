import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import AdminOnly, CurrentUser, Role, Staff
from models.profiles import Profile
from models.promotions import Promotion as PromotionModel
from models.grades import Grade as GradeModel
from models.students import Student as StudentModel
from schemas.common import Pagination, make_meta, pagination
from schemas.students import Student as StudentSchema, StudentCreate

router = APIRouter(prefix="/students", tags=["students"])
logger = logging.getLogger(__name__)

SORTABLE = {
    "lastname": StudentModel.lastname,
    "name": StudentModel.name,
    "created_at": StudentModel.created_at,
}


def _get_or_404(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


def _check_refs(db: Session, payload: StudentCreate):
    profile = db.query(Profile).filter(Profile.id == payload.user_id).first()
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    if profile.role != Role.STUDENT.value:
        raise HTTPException(status_code=422, detail="Profile is not a student account")
    if db.query(PromotionModel).filter(PromotionModel.id == payload.promotion_id).first() is None:
        raise HTTPException(status_code=404, detail="Promotion not found")


def _order_by(sort: Optional[str]):
    """Map "lastname,asc" style keys to an ORDER BY; unknown keys fall back to lastname."""
    field, _, direction = (sort or "lastname,asc").partition(",")
    column = SORTABLE.get(field.strip(), StudentModel.lastname)
    return column.desc() if direction.strip().lower() == "desc" else column.asc()


# ✅ [READ] paginated student list (filters: cohort, name search)
@router.get("/")
def read_students(
    promotion_id: Optional[int] = None,
    search: Optional[str] = None,
    p: Pagination = Depends(pagination),
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(Staff),
):
    query = db.query(StudentModel)
    if promotion_id is not None:
        query = query.filter(StudentModel.promotion_id == promotion_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(StudentModel.name.ilike(pattern), StudentModel.lastname.ilike(pattern)))

    total = query.count()
    records = (
        query.order_by(_order_by(p.sort), StudentModel.id.asc())
        .offset((p.page - 1) * p.size)
        .limit(p.size)
        .all()
    )
    return {
        "success": True,
        "data": [StudentSchema.model_validate(r) for r in records],
        "meta": make_meta(total, p.page, p.size, p.sort),
    }


# ✅ [READ] one student
@router.get("/{student_id}")
def read_student(student_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    return {"success": True, "data": StudentSchema.model_validate(_get_or_404(db, student_id))}


@router.post("/", status_code=201)
def create_student(payload: StudentCreate, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    _check_refs(db, payload)
    student = StudentModel(**payload.model_dump())
    db.add(student)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Profile already has a student record")
    db.refresh(student)
    logger.info("student created: id=%s promotion=%s", student.id, student.promotion_id)
    return {"success": True, "data": StudentSchema.model_validate(student)}


@router.put("/{student_id}")
def update_student(
    student_id: int,
    payload: StudentCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    student = _get_or_404(db, student_id)
    _check_refs(db, payload)
    for key, value in payload.model_dump().items():
        setattr(student, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Profile already has a student record")
    db.refresh(student)
    return {"success": True, "data": StudentSchema.model_validate(student)}


@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    student = _get_or_404(db, student_id)
    db.query(GradeModel).filter(GradeModel.student_id == student_id).delete()
    db.delete(student)
    db.commit()
    logger.info("student deleted: id=%s", student_id)
    return {"success": True, "data": {"student_id": student_id, "message": "Student deleted successfully"}}
