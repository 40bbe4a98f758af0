import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import AdminOnly, CurrentUser, get_current_user
from models.grade_categories import GradeCategory as CategoryModel
from models.grades import Grade as GradeModel
from models.professors import ProfessorSubject
from models.promotions import Promotion as PromotionModel
from models.subjects import Subject as SubjectModel, SubjectPromotion
from schemas.subjects import Subject as SubjectSchema, SubjectCreate
from services import grade_store

router = APIRouter(prefix="/subjects", tags=["subjects"])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, subject_id: int) -> SubjectModel:
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [READ] all subjects, or only those linked to a cohort
@router.get("/")
def read_subjects(
    promotion_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    if promotion_id is not None:
        records = grade_store.subjects_for_promotion(db, promotion_id)
    else:
        records = db.query(SubjectModel).order_by(SubjectModel.name.asc()).all()
    return {"success": True, "data": [SubjectSchema.model_validate(r) for r in records]}


@router.get("/{subject_id}")
def read_subject(subject_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    subject = _get_or_404(db, subject_id)
    promotion_ids = [
        pid for (pid,) in db.query(SubjectPromotion.promotion_id).filter(SubjectPromotion.subject_id == subject_id).all()
    ]
    data = SubjectSchema.model_validate(subject).model_dump()
    data["promotion_ids"] = promotion_ids
    return {"success": True, "data": data}


@router.post("/", status_code=201)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    subject = SubjectModel(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    logger.info("subject created: id=%s name=%s", subject.id, subject.name)
    return {"success": True, "data": SubjectSchema.model_validate(subject)}


@router.put("/{subject_id}")
def update_subject(
    subject_id: int,
    payload: SubjectCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    subject = _get_or_404(db, subject_id)
    for key, value in payload.model_dump().items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return {"success": True, "data": SubjectSchema.model_validate(subject)}


@router.delete("/{subject_id}")
def delete_subject(subject_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    subject = _get_or_404(db, subject_id)

    # dependents go first; SQLite does not enforce ON DELETE CASCADE without the foreign_keys pragma
    category_ids = [cid for (cid,) in db.query(CategoryModel.id).filter(CategoryModel.subject_id == subject_id).all()]
    grades_removed = (
        db.query(GradeModel).filter(GradeModel.category_id.in_(category_ids)).delete(synchronize_session=False)
    )
    db.query(CategoryModel).filter(CategoryModel.subject_id == subject_id).delete(synchronize_session=False)
    db.query(SubjectPromotion).filter(SubjectPromotion.subject_id == subject_id).delete(synchronize_session=False)
    db.query(ProfessorSubject).filter(ProfessorSubject.subject_id == subject_id).delete(synchronize_session=False)
    db.delete(subject)
    db.commit()
    logger.info("subject deleted: id=%s grades_removed=%s", subject_id, grades_removed)
    return {
        "success": True,
        "data": {"subject_id": subject_id, "grades_removed": grades_removed, "message": "Subject deleted successfully"},
    }


# ==========================================================
# [2] Cohort links
# ==========================================================

@router.post("/{subject_id}/promotions/{promotion_id}", status_code=201)
def link_promotion(
    subject_id: int,
    promotion_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    _get_or_404(db, subject_id)
    if db.query(PromotionModel).filter(PromotionModel.id == promotion_id).first() is None:
        raise HTTPException(status_code=404, detail="Promotion not found")

    db.add(SubjectPromotion(subject_id=subject_id, promotion_id=promotion_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Subject already linked to this promotion")
    return {"success": True, "data": {"subject_id": subject_id, "promotion_id": promotion_id}}


@router.delete("/{subject_id}/promotions/{promotion_id}")
def unlink_promotion(
    subject_id: int,
    promotion_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    link = (
        db.query(SubjectPromotion)
        .filter(SubjectPromotion.subject_id == subject_id, SubjectPromotion.promotion_id == promotion_id)
        .first()
    )
    if link is None:
        raise HTTPException(status_code=404, detail="Subject is not linked to this promotion")
    db.delete(link)
    db.commit()
    return {"success": True, "data": {"subject_id": subject_id, "promotion_id": promotion_id, "message": "Link removed"}}
