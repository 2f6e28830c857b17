from __future__ import annotations

import logging
from datetime import time

from sqlalchemy import func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

import app.models  # noqa: F401
from app.db.base import Base
from app.db.session import engine as default_engine
from app.models.course import CourseType
from app.models.day import Day
from app.models.program import Program
from app.models.time_slot import TimeSlot

logger = logging.getLogger(__name__)

DEFAULT_DAYS: tuple[tuple[int, str], ...] = (
    (1, "Monday"),
    (2, "Tuesday"),
    (3, "Wednesday"),
    (4, "Thursday"),
    (5, "Friday"),
)

# (slot id, start, end, type); slot id doubles as slot_order
DEFAULT_TIME_SLOTS: tuple[tuple[int, time, time, CourseType], ...] = (
    (1, time(8, 0), time(9, 15), CourseType.theory),
    (2, time(9, 15), time(10, 30), CourseType.theory),
    (3, time(10, 30), time(11, 45), CourseType.theory),
    (4, time(11, 45), time(13, 0), CourseType.theory),
    (5, time(8, 0), time(10, 30), CourseType.lab),
    (6, time(10, 30), time(13, 0), CourseType.lab),
)

# program code -> number of sections
DEFAULT_PROGRAMS: dict[str, tuple[str, int]] = {
    "CSE": ("Computer Science and Engineering", 2),
    "SWE": ("Software Engineering", 1),
    "EEE": ("Electrical and Electronic Engineering", 3),
    "ME": ("Mechanical Engineering", 2),
    "IPE": ("Industrial and Production Engineering", 1),
    "CEE": ("Civil and Environmental Engineering", 3),
    "BTM": ("Business and Technology Management", 1),
}

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "programs": {"id", "code", "sections"},
    "teachers": {"id", "name", "email"},
    "courses": {"id", "code", "credit_hours", "program", "type", "allocation_capacity", "allocation_availability"},
    "rooms": {"id", "room_number", "is_lab"},
    "days": {"id", "name", "day_order"},
    "time_slots": {"id", "start_time", "end_time", "slot_type", "slot_order"},
    "allocations": {"id", "teacher_id", "course_id", "room_id", "day_id", "slot_id", "program", "section"},
    "activity_logs": {"id", "action", "entity_type", "entity_id", "details"},
}


def seed_reference_data(db: Session) -> None:
    """Insert the weekday, time-slot and program rows when their tables are empty."""
    if not db.execute(select(func.count(Day.id))).scalar_one():
        db.add_all(Day(id=day_id, name=name, day_order=day_id) for day_id, name in DEFAULT_DAYS)
        logger.info("Seeded %d days", len(DEFAULT_DAYS))
    if not db.execute(select(func.count(TimeSlot.id))).scalar_one():
        db.add_all(
            TimeSlot(id=slot_id, start_time=start, end_time=end, slot_type=slot_type, slot_order=slot_id)
            for slot_id, start, end, slot_type in DEFAULT_TIME_SLOTS
        )
        logger.info("Seeded %d time slots", len(DEFAULT_TIME_SLOTS))
    if not db.execute(select(func.count(Program.id))).scalar_one():
        db.add_all(
            Program(code=code, name=name, sections=sections)
            for code, (name, sections) in DEFAULT_PROGRAMS.items()
        )
        logger.info("Seeded %d programs", len(DEFAULT_PROGRAMS))
    db.commit()


def _assert_required_columns(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema(engine: Engine | None = None, *, seed: bool = True) -> None:
    engine = engine or default_engine
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns(engine)
        if seed:
            with Session(engine) as db:
                seed_reference_data(db)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema bootstrap failed")
        raise RuntimeError("Runtime schema bootstrap failed") from exc
