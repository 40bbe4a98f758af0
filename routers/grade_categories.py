import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import CurrentUser, Staff, ensure_teaches
from models.grade_categories import GradeCategory as CategoryModel
from models.grades import Grade as GradeModel
from models.promotions import Promotion as PromotionModel
from models.subjects import Subject as SubjectModel
from schemas.grade_categories import GradeCategory as CategorySchema, GradeCategoryCreate, WeightBalance
from services import grade_store
from services.grading import exceeds_full_weight, weight_balance

router = APIRouter(prefix="/grade-categories", tags=["grade-categories"])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, category_id: int) -> CategoryModel:
    category = db.query(CategoryModel).filter(CategoryModel.id == category_id).first()
    if category is None:
        raise HTTPException(status_code=404, detail="Grade category not found")
    return category


def _check_scope(db: Session, subject_id: int, promotion_id: int):
    if db.query(SubjectModel).filter(SubjectModel.id == subject_id).first() is None:
        raise HTTPException(status_code=404, detail="Subject not found")
    if db.query(PromotionModel).filter(PromotionModel.id == promotion_id).first() is None:
        raise HTTPException(status_code=404, detail="Promotion not found")


def _check_total(db: Session, payload: GradeCategoryCreate, exclude_id=None):
    """Reject a scheme that would go above 100%; being short of 100% is allowed while configuring."""
    weights = grade_store.category_weights(db, payload.subject_id, payload.promotion_id, exclude_id=exclude_id)
    new_total = sum(weights) + payload.weight
    if exceeds_full_weight(weights + [payload.weight], settings.WEIGHT_TOLERANCE):
        logger.warning(
            "category weight rejected: subject=%s promotion=%s total=%.2f",
            payload.subject_id, payload.promotion_id, new_total,
        )
        raise HTTPException(
            status_code=422,
            detail=f"Total weight cannot exceed 100%. Current total would be {new_total:.2f}%",
        )


def _balance(db: Session, subject_id: int, promotion_id: int) -> WeightBalance:
    weights = grade_store.category_weights(db, subject_id, promotion_id)
    return WeightBalance.model_validate(weight_balance(weights, settings.WEIGHT_TOLERANCE))


# ✅ [READ] categories of one subject/cohort plus the weight balance
@router.get("/")
def read_categories(
    subject_id: int,
    promotion_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(Staff),
):
    ensure_teaches(db, user, subject_id)
    records = grade_store.categories_for(db, subject_id, promotion_id)
    return {
        "success": True,
        "data": {
            "categories": [CategorySchema.model_validate(r) for r in records],
            "weights": _balance(db, subject_id, promotion_id),
        },
    }


@router.get("/{category_id}")
def read_category(category_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    category = _get_or_404(db, category_id)
    ensure_teaches(db, user, category.subject_id)
    return {"success": True, "data": CategorySchema.model_validate(category)}


# ✅ [CREATE]
@router.post("/", status_code=201)
def create_category(payload: GradeCategoryCreate, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    _check_scope(db, payload.subject_id, payload.promotion_id)
    ensure_teaches(db, user, payload.subject_id)
    _check_total(db, payload)

    category = CategoryModel(**payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("category created: id=%s %s (%.2f%%) by=%s", category.id, category.name, category.weight, user.profile_id)
    return {
        "success": True,
        "data": {
            "category": CategorySchema.model_validate(category),
            "weights": _balance(db, category.subject_id, category.promotion_id),
        },
    }


# ✅ [UPDATE]
@router.put("/{category_id}")
def update_category(
    category_id: int,
    payload: GradeCategoryCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(Staff),
):
    category = _get_or_404(db, category_id)
    ensure_teaches(db, user, category.subject_id)
    _check_scope(db, payload.subject_id, payload.promotion_id)
    ensure_teaches(db, user, payload.subject_id)

    # grades stay attached to the category, so its scope is frozen once anything is recorded
    moved = (payload.subject_id, payload.promotion_id) != (category.subject_id, category.promotion_id)
    if moved and db.query(GradeModel).filter(GradeModel.category_id == category_id).first() is not None:
        raise HTTPException(
            status_code=409,
            detail="Category already has grades; its subject and promotion cannot change",
        )
    _check_total(db, payload, exclude_id=category_id)

    for key, value in payload.model_dump().items():
        setattr(category, key, value)
    db.commit()
    db.refresh(category)
    logger.info("category updated: id=%s by=%s", category.id, user.profile_id)
    return {
        "success": True,
        "data": {
            "category": CategorySchema.model_validate(category),
            "weights": _balance(db, category.subject_id, category.promotion_id),
        },
    }


# ✅ [DELETE] removes the category and every grade recorded against it
@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    category = _get_or_404(db, category_id)
    ensure_teaches(db, user, category.subject_id)
    subject_id, promotion_id = category.subject_id, category.promotion_id

    removed = db.query(GradeModel).filter(GradeModel.category_id == category_id).delete()
    db.delete(category)
    db.commit()
    logger.info("category deleted: id=%s grades_removed=%s by=%s", category_id, removed, user.profile_id)
    return {
        "success": True,
        "data": {
            "category_id": category_id,
            "grades_removed": removed,
            "weights": _balance(db, subject_id, promotion_id),
            "message": "Grade category deleted successfully",
        },
    }
