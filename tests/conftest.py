"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown with seed companies, jobs and users
- FastAPI test client
- Bearer headers for a regular user, a second user and an admin
"""

import os

# Must be set before the app is imported: no PostgreSQL in tests, cheap bcrypt
os.environ.setdefault("DATABASE_URI", "sqlite://")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("SECRET_KEY", "secret-test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.core.security import Identity, get_password_hash, token_codec
from app.models import Application, Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def seed(db):
    """
    Seed data shared by all tests.

    - companies c1, c2, c3 with 1, 2 and 3 employees
    - jobs J1 (salary 1, equity 0.1), J2 (salary 2, equity 0.2),
      J3 (salary 3, no equity), all at c1
    - users u1, u2, u3 (passwords password1..3), none admin
    - u1 has applied to J1

    Returns:
        The three job ids, in order
    """
    for n in (1, 2, 3):
        db.add(Company(
            handle=f"c{n}",
            name=f"C{n}",
            num_employees=n,
            description=f"Desc{n}",
            logo_url=f"http://c{n}.img",
        ))
    db.flush()

    jobs = [
        Job(title="J1", salary=1, equity="0.1", company_handle="c1"),
        Job(title="J2", salary=2, equity="0.2", company_handle="c1"),
        Job(title="J3", salary=3, equity=None, company_handle="c1"),
    ]
    db.add_all(jobs)
    db.flush()

    for n in (1, 2, 3):
        db.add(User(
            username=f"u{n}",
            password=get_password_hash(f"password{n}"),
            first_name=f"U{n}F",
            last_name=f"U{n}L",
            email=f"user{n}@user.com",
            is_admin=False,
        ))
    db.flush()

    db.add(Application(username="u1", job_id=jobs[0].id))
    db.commit()

    return [job.id for job in jobs]


@pytest.fixture
def db_session():
    """
    Create a fresh, seeded database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_ids(db_session):
    """Seed the database and return the ids of J1, J2 and J3"""
    return seed(db_session)


@pytest.fixture
def client(db_session, job_ids):
    """
    FastAPI test client over the seeded test database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def u1_headers():
    """Bearer header for regular user u1"""
    token = token_codec.create_token(Identity(username="u1", is_admin=False))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def u2_headers():
    """Bearer header for regular user u2"""
    token = token_codec.create_token(Identity(username="u2", is_admin=False))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    """Bearer header for an admin (not present in the users table)"""
    token = token_codec.create_token(Identity(username="admin", is_admin=True))
    return {"Authorization": f"Bearer {token}"}
