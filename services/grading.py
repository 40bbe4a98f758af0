"""
services/grading.py

Grade aggregation and academic status engine.

- Pure functions only: no DB access, no I/O, no module state.
- Routers fetch category and grade rows through services/grade_store.py and hand
  them here; anything with ``id``/``weight`` or ``category_id``/``value``
  attributes works (ORM rows, pydantic models, simple namespaces).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from math import fsum
from typing import Dict, Iterable, List, Literal, Optional, Sequence

FULL_WEIGHT = 100.0
DEFAULT_TOLERANCE = 0.01
DEFAULT_PASSING_GRADE = 60.0
# weights are entered with at most a few decimals; totals are compared at this precision
WEIGHT_DIGITS = 6

MissingPolicy = Literal["zero", "exclude"]


class GradeStatus(str, Enum):
    INCOMPLETE = "incomplete"
    EXCELLENT = "excellent"
    GOOD = "good"
    SATISFACTORY = "satisfactory"
    PASSING = "passing"
    FAILING = "failing"


# Inclusive lower bounds, evaluated top-down; anything below the last one is failing.
STATUS_THRESHOLDS = (
    (90.0, GradeStatus.EXCELLENT),
    (80.0, GradeStatus.GOOD),
    (70.0, GradeStatus.SATISFACTORY),
    (60.0, GradeStatus.PASSING),
)


@dataclass(frozen=True)
class WeightedGrade:
    value: float
    weight: float


@dataclass(frozen=True)
class WeightBalance:
    total: float
    balanced: bool
    missing: float
    excess: float


@dataclass
class SubjectGradeSummary:
    final_grade: float
    status: GradeStatus
    total_categories: int
    completed_categories: int
    category_grades: Dict[int, Optional[float]] = field(default_factory=dict)
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class CategoryStats:
    category_id: int
    name: str
    weight: float
    average: float
    min: float
    max: float
    total_grades: int


# ==========================================================
# [1] Weighted aggregation
# ==========================================================

def compute_final_grade(entries: Iterable[WeightedGrade]) -> float:
    """Weight-normalised average ``Σ(value·weight) / Σ(weight)``.

    Empty input or a zero total weight yields 0.0; values are not re-validated.
    """
    entries = list(entries)
    total_weight = sum(e.weight for e in entries)
    if not entries or total_weight == 0:
        return 0.0
    return sum(e.value * e.weight for e in entries) / total_weight


def classify_status(final_grade: float, recorded_count: int) -> GradeStatus:
    # zero recorded entries is never "failing", even though the average is 0
    if recorded_count == 0:
        return GradeStatus.INCOMPLETE
    for lower_bound, status in STATUS_THRESHOLDS:
        if final_grade >= lower_bound:
            return status
    return GradeStatus.FAILING


def build_weighted_grades(categories, entries, missing_policy: MissingPolicy = "zero") -> List[WeightedGrade]:
    """Pair every category with the student's value for it.

    ``entries`` must already be scoped to one student. With the ``zero`` policy an
    ungraded category contributes value 0 at full weight; with ``exclude`` it is
    dropped so the average renormalises over graded categories only.
    """
    by_category = {e.category_id: e.value for e in entries}
    weighted = []
    for category in categories:
        value = by_category.get(category.id)
        if value is None:
            if missing_policy == "exclude":
                continue
            value = 0.0
        weighted.append(WeightedGrade(value=value, weight=category.weight))
    return weighted


def summarize_subject(categories, entries, missing_policy: MissingPolicy = "zero") -> SubjectGradeSummary:
    """Final grade, status and completeness of one student in one subject/cohort."""
    categories = list(categories)
    category_ids = {c.id for c in categories}
    entries = [e for e in entries if e.category_id in category_ids]

    final_grade = compute_final_grade(build_weighted_grades(categories, entries, missing_policy))
    by_category = {e.category_id: e.value for e in entries}

    stamps = [_entry_timestamp(e) for e in entries]
    stamps = [s for s in stamps if s is not None]

    return SubjectGradeSummary(
        final_grade=final_grade,
        status=classify_status(final_grade, len(entries)),
        total_categories=len(categories),
        completed_categories=len(entries),
        category_grades={c.id: by_category.get(c.id) for c in categories},
        last_updated=max(stamps) if stamps else None,
    )


def _entry_timestamp(entry) -> Optional[datetime]:
    return getattr(entry, "updated_at", None) or getattr(entry, "recorded_at", None)


# ==========================================================
# [2] Category weight validation (advisory)
# ==========================================================

def weight_total(weights: Iterable[float]) -> float:
    # binary addition turns 30 + 30 + 39.99 into 99.99000000000001, inside a 0.01 tolerance
    return round(fsum(weights), WEIGHT_DIGITS)


def validate_weight_sum(weights: Iterable[float], tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return abs(weight_total(weights) - FULL_WEIGHT) < tolerance


def weight_balance(weights: Iterable[float], tolerance: float = DEFAULT_TOLERANCE) -> WeightBalance:
    weights = list(weights)
    total = weight_total(weights)
    return WeightBalance(
        total=round(total, 4),
        balanced=validate_weight_sum(weights, tolerance),
        missing=round(max(0.0, FULL_WEIGHT - total), 4),
        excess=round(max(0.0, total - FULL_WEIGHT), 4),
    )


def exceeds_full_weight(weights: Iterable[float], tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Hard gate for category edits: a scheme may be short of 100% but never above it."""
    return weight_total(weights) - FULL_WEIGHT >= tolerance


# ==========================================================
# [3] Class / student statistics
# ==========================================================

def category_statistics(categories, entries) -> List[CategoryStats]:
    values_by_category: Dict[int, List[float]] = {}
    for e in entries:
        values_by_category.setdefault(e.category_id, []).append(e.value)

    stats = []
    for c in categories:
        values = values_by_category.get(c.id, [])
        stats.append(CategoryStats(
            category_id=c.id,
            name=c.name,
            weight=c.weight,
            average=sum(values) / len(values) if values else 0.0,
            min=min(values) if values else 0.0,
            max=max(values) if values else 0.0,
            total_grades=len(values),
        ))
    return stats


def rank_students(rows: Sequence[dict], key: str = "final_grade") -> List[dict]:
    """Sort by final grade (highest first) and attach a 1-based ``rank``; ties keep input order."""
    ranked = sorted(rows, key=lambda r: r[key], reverse=True)
    for idx, row in enumerate(ranked, start=1):
        row["rank"] = idx
    return ranked


def class_statistics(final_grades: Sequence[float], passing_grade: float = DEFAULT_PASSING_GRADE) -> dict:
    # students still at 0 have nothing graded yet and are left out of the aggregates
    graded = [g for g in final_grades if g > 0]
    if not graded:
        return {
            "total_students": len(final_grades),
            "students_with_grades": 0,
            "class_average": 0.0,
            "highest_grade": 0.0,
            "lowest_grade": 0.0,
            "pass_rate": 0.0,
        }
    return {
        "total_students": len(final_grades),
        "students_with_grades": len(graded),
        "class_average": sum(graded) / len(graded),
        "highest_grade": max(graded),
        "lowest_grade": min(graded),
        "pass_rate": len([g for g in graded if g >= passing_grade]) / len(graded) * 100,
    }


def progress_statistics(summaries: Sequence[SubjectGradeSummary]) -> dict:
    completed = [s.final_grade for s in summaries if s.completed_categories > 0]
    return {
        "total_subjects": len(summaries),
        "completed_subjects": len(completed),
        "average_grade": sum(completed) / len(completed) if completed else 0.0,
        "highest_grade": max(completed) if completed else 0.0,
        "lowest_grade": min(completed) if completed else 0.0,
    }
