import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.schemas.time_slot import TimeSlotRecord  # noqa: E402


@pytest.fixture()
def session_factory():
    # One in-memory database per test, shared by every session the test opens.
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_slot(slot_id, **overrides) -> TimeSlotRecord:
    values = {
        "id": slot_id,
        "courseId": "COMP101",
        "facultyId": "F1",
        "roomId": "CS-Lab-1",
        "departmentId": "CS",
        "dayOfWeek": 1,
        "startTime": "08:00",
        "endTime": "10:00",
        "yearLevel": 1,
        "academicYear": "2026-2027",
        "semester": 1,
    }
    values.update(overrides)
    return TimeSlotRecord.model_validate(values)


@pytest.fixture()
def slot_factory():
    return make_slot
