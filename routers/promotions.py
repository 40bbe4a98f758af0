import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import AdminOnly, CurrentUser, get_current_user
from models.promotions import Promotion as PromotionModel
from schemas.promotions import Promotion as PromotionSchema, PromotionCreate

router = APIRouter(prefix="/promotions", tags=["promotions"])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, promotion_id: int) -> PromotionModel:
    promotion = db.query(PromotionModel).filter(PromotionModel.id == promotion_id).first()
    if promotion is None:
        raise HTTPException(status_code=404, detail="Promotion not found")
    return promotion


# ✅ [READ] list cohorts, newest first
@router.get("/")
def read_promotions(
    active: Optional[bool] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    query = db.query(PromotionModel)
    if active is not None:
        query = query.filter(PromotionModel.active == active)
    records = query.order_by(PromotionModel.entry_year.desc(), PromotionModel.name.asc()).all()
    return {"success": True, "data": [PromotionSchema.model_validate(r) for r in records]}


# ✅ [READ] one cohort
@router.get("/{promotion_id}")
def read_promotion(promotion_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return {"success": True, "data": PromotionSchema.model_validate(_get_or_404(db, promotion_id))}


# ✅ [CREATE]
@router.post("/", status_code=201)
def create_promotion(payload: PromotionCreate, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    promotion = PromotionModel(**payload.model_dump())
    db.add(promotion)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Cohort code '{payload.cohort_code}' already exists")
    db.refresh(promotion)
    logger.info("promotion created: id=%s code=%s by=%s", promotion.id, promotion.cohort_code, user.profile_id)
    return {"success": True, "data": PromotionSchema.model_validate(promotion)}


# ✅ [UPDATE]
@router.put("/{promotion_id}")
def update_promotion(
    promotion_id: int,
    payload: PromotionCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(AdminOnly),
):
    promotion = _get_or_404(db, promotion_id)
    for key, value in payload.model_dump().items():
        setattr(promotion, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Cohort code '{payload.cohort_code}' already exists")
    db.refresh(promotion)
    return {"success": True, "data": PromotionSchema.model_validate(promotion)}


# ✅ [DELETE]
@router.delete("/{promotion_id}")
def delete_promotion(promotion_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(AdminOnly)):
    promotion = _get_or_404(db, promotion_id)
    db.delete(promotion)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Promotion still has students assigned")
    logger.info("promotion deleted: id=%s by=%s", promotion_id, user.profile_id)
    return {"success": True, "data": {"promotion_id": promotion_id, "message": "Promotion deleted successfully"}}
