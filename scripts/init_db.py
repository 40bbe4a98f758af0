"""
Create every table on the configured database (local development only).

    python -m scripts.init_db --admin-email admin@spider.edu
"""
import argparse

from database.db import Base, SessionLocal, engine
from models import grade_categories, grades, professors, profiles, promotions, students, subjects  # noqa: F401  (register tables)
from models.profiles import Profile


def init_db(admin_email=None):
    Base.metadata.create_all(bind=engine)
    print("✅ tables created")

    if not admin_email:
        return
    db = SessionLocal()
    try:
        if db.query(Profile).filter(Profile.email == admin_email).first() is None:
            db.add(Profile(email=admin_email, role="admin"))
            db.commit()
            print(f"✅ admin profile created: {admin_email}")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create Spider Grades tables")
    parser.add_argument("--admin-email", default=None)
    args = parser.parse_args()
    init_db(args.admin_email)
