from datetime import datetime
from types import SimpleNamespace

import pytest

from services.grading import (
    GradeStatus,
    WeightedGrade,
    build_weighted_grades,
    category_statistics,
    class_statistics,
    classify_status,
    compute_final_grade,
    exceeds_full_weight,
    progress_statistics,
    rank_students,
    summarize_subject,
    validate_weight_sum,
    weight_balance,
    weight_total,
)


def category(id, weight, name="c"):
    return SimpleNamespace(id=id, weight=weight, name=name)


def entry(category_id, value, updated_at=None, recorded_at=None):
    return SimpleNamespace(category_id=category_id, value=value, updated_at=updated_at, recorded_at=recorded_at)


# ==========================================================
# compute_final_grade
# ==========================================================

def test_final_grade_of_empty_list_is_zero():
    assert compute_final_grade([]) == 0


def test_final_grade_with_zero_total_weight_is_zero():
    assert compute_final_grade([WeightedGrade(value=80, weight=0)]) == 0


def test_final_grade_equal_weights():
    assert compute_final_grade([WeightedGrade(90, 50), WeightedGrade(70, 50)]) == 80.0


def test_ungraded_category_pulls_average_down():
    assert compute_final_grade([WeightedGrade(100, 30), WeightedGrade(0, 70)]) == 30.0


def test_final_grade_normalises_when_weights_do_not_reach_100():
    assert compute_final_grade([WeightedGrade(80, 20), WeightedGrade(60, 20)]) == pytest.approx(70.0)


def test_final_grade_accepts_generators_and_is_repeatable():
    pairs = [WeightedGrade(88, 30), WeightedGrade(72.5, 30), WeightedGrade(91, 40)]
    first = compute_final_grade(p for p in pairs)
    assert first == compute_final_grade(pairs)
    assert first == compute_final_grade(pairs)


# ==========================================================
# classify_status
# ==========================================================

@pytest.mark.parametrize(
    "grade,expected",
    [
        (100, GradeStatus.EXCELLENT),
        (90.0, GradeStatus.EXCELLENT),
        (89.999, GradeStatus.GOOD),
        (80.0, GradeStatus.GOOD),
        (70.0, GradeStatus.SATISFACTORY),
        (60.0, GradeStatus.PASSING),
        (59.999, GradeStatus.FAILING),
        (0.0, GradeStatus.FAILING),
    ],
)
def test_status_thresholds(grade, expected):
    assert classify_status(grade, recorded_count=1) == expected


def test_no_recorded_entries_is_incomplete_regardless_of_grade():
    assert classify_status(compute_final_grade([]), recorded_count=0) == GradeStatus.INCOMPLETE
    assert classify_status(95.0, recorded_count=0) == GradeStatus.INCOMPLETE


def test_status_values_are_plain_strings():
    assert GradeStatus.SATISFACTORY == "satisfactory"


# ==========================================================
# weight validation
# ==========================================================

def test_weights_summing_to_100_are_valid():
    assert validate_weight_sum([30, 30, 40]) is True


def test_weights_just_short_of_100_are_invalid():
    assert validate_weight_sum([30, 30, 39.99]) is False


def test_weights_within_tolerance_are_valid():
    assert validate_weight_sum([30, 30, 40.005]) is True


def test_repeated_fractions_absorb_float_error():
    assert validate_weight_sum([100 / 3] * 3) is True


def test_weight_balance_reports_missing_and_excess():
    short = weight_balance([30, 30])
    assert short.balanced is False
    assert short.total == 60
    assert short.missing == 40
    assert short.excess == 0

    over = weight_balance([60, 50])
    assert over.balanced is False
    assert over.excess == 10
    assert over.missing == 0


def test_weight_balance_sees_a_hundredth_short_of_100():
    balance = weight_balance([30, 30, 39.99])
    assert balance.balanced is False
    assert balance.missing == pytest.approx(0.01)
    assert weight_total([30, 30, 39.99]) == 99.99
    assert validate_weight_sum(w for w in [30, 30, 39.99]) is False


def test_exceeds_full_weight_only_above_tolerance():
    assert exceeds_full_weight([50, 50]) is False
    assert exceeds_full_weight([50, 50.005]) is False
    assert exceeds_full_weight([50, 49]) is False
    assert exceeds_full_weight([50, 51]) is True


# ==========================================================
# building and summarising
# ==========================================================

def test_missing_categories_count_as_zero_by_default():
    cats = [category(1, 30), category(2, 70)]
    weighted = build_weighted_grades(cats, [entry(1, 100)])
    assert weighted == [WeightedGrade(100, 30), WeightedGrade(0.0, 70)]
    assert compute_final_grade(weighted) == 30.0


def test_exclude_policy_renormalises_over_graded_categories():
    cats = [category(1, 30), category(2, 70)]
    weighted = build_weighted_grades(cats, [entry(1, 100)], missing_policy="exclude")
    assert weighted == [WeightedGrade(100, 30)]
    assert compute_final_grade(weighted) == 100.0


def test_summary_of_student_without_entries():
    summary = summarize_subject([category(1, 50), category(2, 50)], [])
    assert summary.final_grade == 0
    assert summary.status == GradeStatus.INCOMPLETE
    assert summary.completed_categories == 0
    assert summary.total_categories == 2
    assert summary.category_grades == {1: None, 2: None}
    assert summary.last_updated is None


def test_summary_ignores_entries_of_other_subjects_and_tracks_last_update():
    early, late = datetime(2024, 3, 1, 10, 0), datetime(2024, 4, 2, 9, 30)
    cats = [category(1, 50), category(2, 50)]
    entries = [entry(1, 90, updated_at=early), entry(2, 70, recorded_at=late), entry(99, 10)]

    summary = summarize_subject(cats, entries)

    assert summary.final_grade == 80.0
    assert summary.status == GradeStatus.GOOD
    assert summary.completed_categories == 2
    assert summary.category_grades == {1: 90, 2: 70}
    assert summary.last_updated == late


def test_a_single_low_entry_is_failing_not_incomplete():
    summary = summarize_subject([category(1, 50), category(2, 50)], [entry(1, 40)])
    assert summary.final_grade == 20.0
    assert summary.status == GradeStatus.FAILING


# ==========================================================
# statistics
# ==========================================================

def test_category_statistics():
    cats = [category(1, 60, "Exams"), category(2, 40, "Labs")]
    stats = category_statistics(cats, [entry(1, 80), entry(1, 60), entry(1, 100)])

    exams, labs = stats
    assert (exams.average, exams.min, exams.max, exams.total_grades) == (80, 60, 100, 3)
    assert (labs.average, labs.min, labs.max, labs.total_grades) == (0, 0, 0, 0)
    assert labs.name == "Labs"


def test_rank_students_is_descending_and_stable_on_ties():
    rows = [
        {"student_id": 1, "final_grade": 70.0},
        {"student_id": 2, "final_grade": 90.0},
        {"student_id": 3, "final_grade": 70.0},
    ]
    ranked = rank_students(rows)
    assert [r["student_id"] for r in ranked] == [2, 1, 3]
    assert [r["rank"] for r in ranked] == [1, 2, 3]


def test_class_statistics_skip_students_at_zero():
    stats = class_statistics([0.0, 50.0, 70.0, 90.0])
    assert stats["total_students"] == 4
    assert stats["students_with_grades"] == 3
    assert stats["class_average"] == pytest.approx(70.0)
    assert stats["highest_grade"] == 90.0
    assert stats["lowest_grade"] == 50.0
    assert stats["pass_rate"] == pytest.approx(200 / 3)


def test_class_statistics_without_grades():
    stats = class_statistics([0.0, 0.0])
    assert stats["students_with_grades"] == 0
    assert stats["class_average"] == 0
    assert stats["pass_rate"] == 0


def test_progress_statistics_use_only_subjects_with_entries():
    cats = [category(1, 100)]
    graded = summarize_subject(cats, [entry(1, 85)])
    other = summarize_subject([category(2, 100)], [entry(2, 65)])
    empty = summarize_subject([category(3, 100)], [])

    stats = progress_statistics([graded, other, empty])
    assert stats["total_subjects"] == 3
    assert stats["completed_subjects"] == 2
    assert stats["average_grade"] == 75.0
    assert stats["highest_grade"] == 85.0
    assert stats["lowest_grade"] == 65.0
