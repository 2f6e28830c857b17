import os

# The app builds its default engine at import time; keep it off any real database.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.config import Settings, get_settings
from app.db.base import Base
from app.db.bootstrap import seed_reference_data
from app.db.session import build_engine
from app.main import app
from app.models.room import Room
from app.schemas.course import CourseCreate
from app.schemas.teacher import TeacherCreate
from app.services.reference import create_course, create_teacher


@pytest.fixture()
def engine():
    engine = build_engine("sqlite+pysqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    with factory() as db:
        seed_reference_data(db)
    return factory


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def settings():
    return Settings(database_url="sqlite+pysqlite://")


@pytest.fixture()
def client(session_factory, settings):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def catalog(db_session, settings):
    """Teachers, rooms and courses for service-level tests; CSE has 2 sections, EEE has 3."""
    teachers = {
        "alice": create_teacher(db_session, TeacherCreate(name="Alice Rahman", email="alice@univ.edu")),
        "bob": create_teacher(db_session, TeacherCreate(name="Bob Karim", email="bob@univ.edu")),
    }
    rooms = {
        "r101": Room(room_number="101", capacity=40, is_lab=False),
        "r102": Room(room_number="102", capacity=40, is_lab=False),
        "lab1": Room(room_number="LAB-1", capacity=30, is_lab=True),
    }
    db_session.add_all(rooms.values())
    db_session.commit()
    courses = {
        key: create_course(db_session, CourseCreate(**payload), settings=settings)
        for key, payload in {
            "cse101": {"code": "CSE101", "name": "Structured Programming", "credit_hours": 3.0, "program": "CSE", "type": "Theory"},
            "cse103": {"code": "CSE103", "name": "Discrete Mathematics", "credit_hours": 1.5, "program": "CSE", "type": "Theory"},
            "cse102": {"code": "CSE102", "name": "Structured Programming Lab", "credit_hours": 1.5, "program": "CSE", "type": "Lab"},
            "eee201": {"code": "EEE201", "name": "Electrical Circuits", "credit_hours": 3.0, "program": "EEE", "type": "Theory"},
        }.items()
    }
    return SimpleNamespace(teachers=teachers, rooms=rooms, courses=courses)
