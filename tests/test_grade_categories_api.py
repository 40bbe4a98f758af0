from conftest import auth
from models.promotions import Promotion


def category_body(school, name="Project", weight=10.0, **extra):
    body = {"name": name, "weight": weight, "subject_id": school.subject, "promotion_id": school.promotion}
    body.update(extra)
    return body


def test_list_categories_with_weight_balance(client, school):
    resp = client.get(
        "/v1/grade-categories/",
        params={"subject_id": school.subject, "promotion_id": school.promotion},
        headers=auth(school.professor),
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [c["name"] for c in data["categories"]] == ["Homework", "Midterm", "Final"]
    assert data["weights"] == {"total": 100.0, "balanced": True, "missing": 0.0, "excess": 0.0}


def test_category_that_overflows_100_is_rejected(client, school):
    resp = client.post("/v1/grade-categories/", json=category_body(school, weight=5), headers=auth(school.professor))
    assert resp.status_code == 422
    assert "105.00%" in resp.json()["error"]["message"]


def test_partial_scheme_is_allowed_and_flagged(client, school):
    client.delete(f"/v1/grade-categories/{school.categories[2]}", headers=auth(school.professor))

    resp = client.post(
        "/v1/grade-categories/",
        json=category_body(school, name="Quizzes", weight=15, description="weekly quizzes"),
        headers=auth(school.professor),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["category"]["description"] == "weekly quizzes"
    assert data["weights"]["balanced"] is False
    assert data["weights"]["missing"] == 25.0


def test_update_excludes_own_weight_from_total(client, school):
    resp = client.put(
        f"/v1/grade-categories/{school.categories[2]}",
        json=category_body(school, name="Final exam", weight=40),
        headers=auth(school.professor),
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["category"]["name"] == "Final exam"

    too_heavy = client.put(
        f"/v1/grade-categories/{school.categories[2]}",
        json=category_body(school, name="Final exam", weight=41),
        headers=auth(school.professor),
    )
    assert too_heavy.status_code == 422


def test_weight_must_be_positive(client, school):
    resp = client.post("/v1/grade-categories/", json=category_body(school, weight=0), headers=auth(school.admin))
    assert resp.status_code == 422


def test_unassigned_professor_cannot_touch_categories(client, school):
    resp = client.delete(f"/v1/grade-categories/{school.categories[0]}", headers=auth(school.other_professor))
    assert resp.status_code == 403


def test_deleting_category_removes_its_grades(client, school):
    client.put(
        "/v1/grades/",
        json={"student_id": school.students[0], "category_id": school.categories[0], "value": 80},
        headers=auth(school.professor),
    )
    resp = client.delete(f"/v1/grade-categories/{school.categories[0]}", headers=auth(school.professor))
    data = resp.json()["data"]
    assert data["grades_removed"] == 1
    assert data["weights"]["total"] == 70.0
    assert client.get(f"/v1/grade-categories/{school.categories[0]}", headers=auth(school.professor)).status_code == 404


def test_unassigned_professor_cannot_read_categories(client, school):
    listed = client.get(
        "/v1/grade-categories/",
        params={"subject_id": school.subject, "promotion_id": school.promotion},
        headers=auth(school.other_professor),
    )
    assert listed.status_code == 403
    one = client.get(f"/v1/grade-categories/{school.categories[0]}", headers=auth(school.other_professor))
    assert one.status_code == 403


def test_graded_category_cannot_move_to_another_promotion(client, db, school):
    later = Promotion(name="2025A AM", cohort_code="2025A", entry_year=2025, graduation_year=2028, shift="AM")
    db.add(later)
    db.commit()

    client.put(
        "/v1/grades/",
        json={"student_id": school.students[0], "category_id": school.categories[0], "value": 80},
        headers=auth(school.professor),
    )
    moved = client.put(
        f"/v1/grade-categories/{school.categories[0]}",
        json=category_body(school, name="Homework", weight=30, promotion_id=later.id),
        headers=auth(school.professor),
    )
    assert moved.status_code == 409
    assert moved.json()["error"]["code"] == "CONFLICT"

    renamed = client.put(
        f"/v1/grade-categories/{school.categories[0]}",
        json=category_body(school, name="Assignments", weight=30),
        headers=auth(school.professor),
    )
    assert renamed.status_code == 200
    assert renamed.json()["data"]["category"]["promotion_id"] == school.promotion


def test_ungraded_category_can_move_to_another_promotion(client, db, school):
    later = Promotion(name="2025A AM", cohort_code="2025A", entry_year=2025, graduation_year=2028, shift="AM")
    db.add(later)
    db.commit()

    resp = client.put(
        f"/v1/grade-categories/{school.categories[0]}",
        json=category_body(school, name="Homework", weight=30, promotion_id=later.id),
        headers=auth(school.professor),
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["weights"]["total"] == 30.0
