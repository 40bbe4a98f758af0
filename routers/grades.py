import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import CurrentUser, Staff, ensure_teaches
from models.grade_categories import GradeCategory as CategoryModel
from models.grades import Grade as GradeModel
from models.students import Student as StudentModel
from schemas.grade_categories import WeightBalance
from schemas.grades import Grade as GradeSchema, GradeUpsert
from services import grade_store
from services.grading import weight_balance

router = APIRouter(prefix="/grades", tags=["grades"])
logger = logging.getLogger(__name__)


# ✅ [UPSERT] record or correct one student's grade for one category
# - never blocked by an unbalanced scheme; the balance is returned as a warning flag
@router.put("/")
def upsert_grade(payload: GradeUpsert, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    category = db.query(CategoryModel).filter(CategoryModel.id == payload.category_id).first()
    if category is None:
        raise HTTPException(status_code=404, detail="Grade category not found")
    student = db.query(StudentModel).filter(StudentModel.id == payload.student_id).first()
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    if student.promotion_id != category.promotion_id:
        raise HTTPException(status_code=422, detail="Student does not belong to the category's promotion")
    ensure_teaches(db, user, category.subject_id)

    grade, created = grade_store.upsert_grade(
        db,
        student_id=payload.student_id,
        category_id=payload.category_id,
        value=payload.value,
        comments=payload.comments,
        editor_id=user.profile_id,
    )
    logger.info(
        "grade %s: student=%s category=%s value=%.2f by=%s",
        "created" if created else "updated", grade.student_id, grade.category_id, grade.value, user.profile_id,
    )

    weights = grade_store.category_weights(db, category.subject_id, category.promotion_id)
    return {
        "success": True,
        "data": {
            "grade": GradeSchema.model_validate(grade),
            "created": created,
            "weights": WeightBalance.model_validate(weight_balance(weights, settings.WEIGHT_TOLERANCE)),
        },
    }


# ✅ [READ] grades of one subject/cohort, optionally one student
@router.get("/")
def read_grades(
    subject_id: int,
    promotion_id: int,
    student_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(Staff),
):
    ensure_teaches(db, user, subject_id)
    records = grade_store.grades_for(db, subject_id, promotion_id, student_id=student_id)
    return {"success": True, "data": [GradeSchema.model_validate(r) for r in records]}


@router.get("/{grade_id}")
def read_grade(grade_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    grade = db.query(GradeModel).filter(GradeModel.id == grade_id).first()
    if grade is None:
        raise HTTPException(status_code=404, detail="Grade not found")
    category = db.query(CategoryModel).filter(CategoryModel.id == grade.category_id).first()
    if category is not None:
        ensure_teaches(db, user, category.subject_id)
    return {"success": True, "data": GradeSchema.model_validate(grade)}


# ✅ [DELETE]
@router.delete("/{grade_id}")
def delete_grade(grade_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    grade = db.query(GradeModel).filter(GradeModel.id == grade_id).first()
    if grade is None:
        raise HTTPException(status_code=404, detail="Grade not found")
    category = db.query(CategoryModel).filter(CategoryModel.id == grade.category_id).first()
    if category is not None:
        ensure_teaches(db, user, category.subject_id)

    db.delete(grade)
    db.commit()
    logger.info("grade deleted: id=%s by=%s", grade_id, user.profile_id)
    return {"success": True, "data": {"grade_id": grade_id, "message": "Grade deleted successfully"}}
