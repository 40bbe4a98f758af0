"""
services/grade_store.py

Query helpers over the grade tables. Routers call these and pass the rows
into services/grading.py; nothing here computes grades.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.grade_categories import GradeCategory
from models.grades import Grade
from models.promotions import Promotion
from models.students import Student
from models.subjects import Subject, SubjectPromotion

logger = logging.getLogger(__name__)


def categories_for(db: Session, subject_id: int, promotion_id: int) -> List[GradeCategory]:
    return (
        db.query(GradeCategory)
        .filter(GradeCategory.subject_id == subject_id, GradeCategory.promotion_id == promotion_id)
        .order_by(GradeCategory.created_at.asc(), GradeCategory.id.asc())
        .all()
    )


def category_weights(db: Session, subject_id: int, promotion_id: int, exclude_id: Optional[int] = None) -> List[float]:
    query = db.query(GradeCategory.weight).filter(
        GradeCategory.subject_id == subject_id,
        GradeCategory.promotion_id == promotion_id,
    )
    if exclude_id is not None:
        query = query.filter(GradeCategory.id != exclude_id)
    return [w for (w,) in query.all()]


def grades_for(db: Session, subject_id: int, promotion_id: int, student_id: Optional[int] = None) -> List[Grade]:
    query = (
        db.query(Grade)
        .join(GradeCategory, GradeCategory.id == Grade.category_id)
        .filter(GradeCategory.subject_id == subject_id, GradeCategory.promotion_id == promotion_id)
    )
    if student_id is not None:
        query = query.filter(Grade.student_id == student_id)
    return query.all()


def students_in(db: Session, promotion_id: int) -> List[Student]:
    return (
        db.query(Student)
        .filter(Student.promotion_id == promotion_id)
        .order_by(Student.lastname.asc(), Student.name.asc())
        .all()
    )


def subjects_for_promotion(db: Session, promotion_id: int) -> List[Subject]:
    return (
        db.query(Subject)
        .join(SubjectPromotion, SubjectPromotion.subject_id == Subject.id)
        .filter(SubjectPromotion.promotion_id == promotion_id)
        .order_by(Subject.name.asc())
        .all()
    )


def upsert_grade(
    db: Session,
    student_id: int,
    category_id: int,
    value: float,
    comments: Optional[str],
    editor_id: int,
) -> Tuple[Grade, bool]:
    """Create the (student, category) entry or update it in place. Returns ``(grade, created)``."""
    grade = _find_grade(db, student_id, category_id)
    if grade is None:
        grade = Grade(
            student_id=student_id,
            category_id=category_id,
            value=value,
            comments=comments,
            editor_id=editor_id,
        )
        db.add(grade)
        try:
            db.commit()
            db.refresh(grade)
            return grade, True
        except IntegrityError:
            # another editor inserted the same pair first; fall through to update
            db.rollback()
            logger.info("grade insert lost race, updating instead: student=%s category=%s", student_id, category_id)
            grade = _find_grade(db, student_id, category_id)
            if grade is None:
                raise

    grade.value = value
    grade.comments = comments
    grade.editor_id = editor_id
    db.commit()
    db.refresh(grade)
    return grade, False


def _find_grade(db: Session, student_id: int, category_id: int) -> Optional[Grade]:
    return (
        db.query(Grade)
        .filter(Grade.student_id == student_id, Grade.category_id == category_id)
        .first()
    )


def history_rows(
    db: Session,
    student_id: int,
    subject_id: Optional[int] = None,
    promotion_id: Optional[int] = None,
):
    """Grade entries of one student joined with category, subject and cohort, newest update first."""
    query = (
        db.query(Grade, GradeCategory, Subject, Promotion)
        .join(GradeCategory, GradeCategory.id == Grade.category_id)
        .join(Subject, Subject.id == GradeCategory.subject_id)
        .join(Promotion, Promotion.id == GradeCategory.promotion_id)
        .filter(Grade.student_id == student_id)
    )
    if subject_id is not None:
        query = query.filter(GradeCategory.subject_id == subject_id)
    if promotion_id is not None:
        query = query.filter(GradeCategory.promotion_id == promotion_id)
    return query.order_by(Grade.updated_at.desc(), Grade.id.desc()).all()
