import os

# settings are read at import time; point them at throwaway values first
os.environ["ENV"] = "test"
os.environ["API_TOKEN"] = "test-token"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database.db import Base, get_db
from models.grade_categories import GradeCategory
from models.professors import Professor, ProfessorSubject
from models.profiles import Profile
from models.promotions import Promotion
from models.students import Student
from models.subjects import Subject, SubjectPromotion

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def auth(profile_id):
    return {"Authorization": "Bearer test-token", "X-User-Id": str(profile_id)}


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def school(db):
    """One cohort, one subject taught by one professor, three students, a 30/30/40 scheme."""
    admin = Profile(email="admin@spider.edu", role="admin")
    prof_profile = Profile(email="prof@spider.edu", role="professor")
    other_prof_profile = Profile(email="other@spider.edu", role="professor")
    student_profiles = [Profile(email=f"student{i}@spider.edu", role="student") for i in range(3)]
    db.add_all([admin, prof_profile, other_prof_profile, *student_profiles])
    db.flush()

    promotion = Promotion(name="2024A AM", cohort_code="2024A", entry_year=2024, graduation_year=2027, shift="AM")
    subject = Subject(name="Mathematics", code="MAT-101", year=1, semester=1)
    other_subject = Subject(name="Physics", code="PHY-101", year=1, semester=1)
    db.add_all([promotion, subject, other_subject])
    db.flush()
    db.add_all([
        SubjectPromotion(subject_id=subject.id, promotion_id=promotion.id),
        SubjectPromotion(subject_id=other_subject.id, promotion_id=promotion.id),
    ])

    professor = Professor(user_id=prof_profile.id, name="Ada", lastname="Lovelace", specialty="Mathematics")
    other_professor = Professor(user_id=other_prof_profile.id, name="Marie", lastname="Curie", specialty="Physics")
    db.add_all([professor, other_professor])
    db.flush()
    db.add_all([
        ProfessorSubject(professor_id=professor.id, subject_id=subject.id),
        ProfessorSubject(professor_id=other_professor.id, subject_id=other_subject.id),
    ])

    names = [("Ana", "Alvarez"), ("Bruno", "Barrios"), ("Carla", "Castro")]
    students = [
        Student(user_id=p.id, name=n, lastname=ln, promotion_id=promotion.id)
        for p, (n, ln) in zip(student_profiles, names)
    ]
    db.add_all(students)
    db.flush()

    categories = [
        GradeCategory(name="Homework", weight=30, subject_id=subject.id, promotion_id=promotion.id),
        GradeCategory(name="Midterm", weight=30, subject_id=subject.id, promotion_id=promotion.id),
        GradeCategory(name="Final", weight=40, subject_id=subject.id, promotion_id=promotion.id),
    ]
    db.add_all(categories)
    db.commit()

    return SimpleNamespace(
        admin=admin.id,
        professor=prof_profile.id,
        other_professor=other_prof_profile.id,
        student_profiles=[p.id for p in student_profiles],
        promotion=promotion.id,
        subject=subject.id,
        other_subject=other_subject.id,
        students=[s.id for s in students],
        categories=[c.id for c in categories],
    )
