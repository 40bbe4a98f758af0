import logging
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import CurrentUser, Staff, ensure_student_access, ensure_teaches, get_current_user
from models.profiles import Profile
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from schemas.reports import (
    CategoryBreakdownOut, HistoryItemOut, OverviewOut, ProgressOut, SubjectGradeOut, SubjectProgressOut,
)
from services import grade_store
from services.export_service import export_filename, overview_to_csv
from services.grading import (
    category_statistics, class_statistics, classify_status, progress_statistics, rank_students,
    summarize_subject, weight_balance,
)

router = APIRouter(prefix="/reports", tags=["reports"])
logger = logging.getLogger(__name__)

# default direction per sort key when none is given
HISTORY_DEFAULT_ORDER = {"date": "desc", "subject": "asc", "grade": "desc"}


def _student_or_404(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


def _subject_or_404(db: Session, subject_id: int) -> SubjectModel:
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject


def _build_overview(db: Session, subject_id: int, promotion_id: int) -> dict:
    categories = grade_store.categories_for(db, subject_id, promotion_id)
    students = grade_store.students_in(db, promotion_id)
    grades = grade_store.grades_for(db, subject_id, promotion_id)

    emails = dict(
        db.query(Profile.id, Profile.email).filter(Profile.id.in_([s.user_id for s in students])).all()
    ) if students else {}

    grades_by_student = {}
    for g in grades:
        grades_by_student.setdefault(g.student_id, []).append(g)

    rows = []
    for student in students:
        summary = summarize_subject(categories, grades_by_student.get(student.id, []), settings.MISSING_GRADE_POLICY)
        rows.append({
            "student_id": student.id,
            "student_name": f"{student.name} {student.lastname}",
            "email": emails.get(student.user_id),
            "category_grades": summary.category_grades,
            "final_grade": summary.final_grade,
            "status": summary.status,
            "completed_categories": summary.completed_categories,
            "total_categories": summary.total_categories,
        })

    ranked = rank_students(rows)
    return {
        "subject_id": subject_id,
        "promotion_id": promotion_id,
        "categories": [asdict(s) for s in category_statistics(categories, grades)],
        "students": ranked,
        "statistics": class_statistics([r["final_grade"] for r in rows], settings.PASSING_GRADE),
        "weights": asdict(weight_balance([c.weight for c in categories], settings.WEIGHT_TOLERANCE)),
    }


# ==========================================================
# [1] Professor / admin views
# ==========================================================

# ✅ [OVERVIEW] category stats, ranked final grades and class statistics of one subject/cohort
@router.get("/overview")
def get_overview(subject_id: int, promotion_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    _subject_or_404(db, subject_id)
    ensure_teaches(db, user, subject_id)
    overview = _build_overview(db, subject_id, promotion_id)
    return {"success": True, "data": OverviewOut.model_validate(overview)}


# ✅ [EXPORT] same overview as a CSV download
@router.get("/overview/export")
def export_overview(subject_id: int, promotion_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(Staff)):
    _subject_or_404(db, subject_id)
    ensure_teaches(db, user, subject_id)
    overview = _build_overview(db, subject_id, promotion_id)
    if not overview["students"]:
        raise HTTPException(status_code=404, detail="No grades to export")

    content = overview_to_csv(overview["categories"], overview["students"])
    logger.info("overview exported: subject=%s promotion=%s rows=%s", subject_id, promotion_id, len(overview["students"]))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(subject_id, promotion_id)}"'},
    )


# ==========================================================
# [2] Student views (own records only for the student role)
# ==========================================================

# ✅ [READ] one student's final grade and per-category breakdown for one subject
@router.get("/students/{student_id}/subjects/{subject_id}")
def get_student_subject_grade(
    student_id: int,
    subject_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    student = _student_or_404(db, student_id)
    ensure_student_access(db, user, student_id)
    _subject_or_404(db, subject_id)

    categories = grade_store.categories_for(db, subject_id, student.promotion_id)
    grades = grade_store.grades_for(db, subject_id, student.promotion_id, student_id=student_id)
    summary = summarize_subject(categories, grades, settings.MISSING_GRADE_POLICY)
    by_category = {g.category_id: g for g in grades}

    breakdown = []
    for c in categories:
        g = by_category.get(c.id)
        breakdown.append(CategoryBreakdownOut(
            category_id=c.id,
            name=c.name,
            weight=c.weight,
            value=g.value if g else None,
            comments=g.comments if g else None,
            updated_at=(g.updated_at or g.recorded_at) if g else None,
        ))

    data = SubjectGradeOut(
        student_id=student_id,
        subject_id=subject_id,
        promotion_id=student.promotion_id,
        final_grade=summary.final_grade,
        status=summary.status,
        completed_categories=summary.completed_categories,
        total_categories=summary.total_categories,
        last_updated=summary.last_updated,
        categories=breakdown,
        weights=asdict(weight_balance([c.weight for c in categories], settings.WEIGHT_TOLERANCE)),
    )
    return {"success": True, "data": data}


# ✅ [PROGRESS] one summary per subject of the student's cohort plus overall statistics
@router.get("/students/{student_id}/progress")
def get_student_progress(student_id: int, db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    student = _student_or_404(db, student_id)
    ensure_student_access(db, user, student_id)

    subjects, summaries = [], []
    for subject in grade_store.subjects_for_promotion(db, student.promotion_id):
        categories = grade_store.categories_for(db, subject.id, student.promotion_id)
        grades = grade_store.grades_for(db, subject.id, student.promotion_id, student_id=student_id)
        summary = summarize_subject(categories, grades, settings.MISSING_GRADE_POLICY)
        summaries.append(summary)
        subjects.append(SubjectProgressOut(
            subject_id=subject.id,
            subject_name=subject.name,
            subject_code=subject.code,
            final_grade=summary.final_grade,
            status=summary.status,
            total_categories=summary.total_categories,
            completed_categories=summary.completed_categories,
            last_updated=summary.last_updated,
        ))

    data = ProgressOut(
        student_id=student_id,
        promotion_id=student.promotion_id,
        subjects=subjects,
        statistics=progress_statistics(summaries),
    )
    return {"success": True, "data": data}


# ✅ [HISTORY] every grade the student has, with subject/cohort context
@router.get("/students/{student_id}/history")
def get_student_history(
    student_id: int,
    subject_id: Optional[int] = None,
    promotion_id: Optional[int] = None,
    sort: Literal["date", "subject", "grade"] = "date",
    order: Optional[Literal["asc", "desc"]] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    _student_or_404(db, student_id)
    ensure_student_access(db, user, student_id)

    items = []
    for grade, category, subject, promotion in grade_store.history_rows(db, student_id, subject_id, promotion_id):
        items.append(HistoryItemOut(
            id=grade.id,
            subject_id=subject.id,
            subject_name=subject.name,
            subject_code=subject.code,
            promotion_id=promotion.id,
            promotion_name=promotion.name,
            promotion_year=promotion.entry_year,
            category_name=category.name,
            value=grade.value,
            weight=category.weight,
            status=classify_status(grade.value, 1),
            comments=grade.comments,
            recorded_at=grade.recorded_at,
            updated_at=grade.updated_at or grade.recorded_at,
        ))

    keys = {
        "date": lambda i: (i.updated_at is not None, i.updated_at or 0, i.id),
        "subject": lambda i: i.subject_name.lower(),
        "grade": lambda i: i.value,
    }
    descending = (order or HISTORY_DEFAULT_ORDER[sort]) == "desc"
    items.sort(key=keys[sort], reverse=descending)
    return {"success": True, "data": items, "meta": {"count": len(items), "sort": sort, "order": "desc" if descending else "asc"}}
