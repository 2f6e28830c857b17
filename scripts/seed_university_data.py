"""Seed demo teachers, rooms and courses for the class routine API.

Run:
  PYTHONPATH=backend python scripts/seed_university_data.py
"""

from __future__ import annotations

import os

from sqlalchemy import func, select

from app.core.config import get_settings
from app.db.bootstrap import ensure_runtime_schema
from app.db.session import SessionLocal
from app.models.course import Course, CourseType
from app.models.program import Program
from app.models.room import Room
from app.models.teacher import Teacher
from app.services.workload import course_capacity

MOCK_EMAIL_DOMAIN = os.getenv("SEED_MOCK_EMAIL_DOMAIN", "university.edu").strip().lower() or "university.edu"

TEACHERS = [
    "Ayesha Siddiqua",
    "Mahmudul Hasan",
    "Nusrat Jahan",
    "Rafiqul Islam",
    "Tanvir Ahmed",
    "Farzana Akter",
]

# (room number, capacity, is_lab)
ROOMS = [
    ("101", 45, False),
    ("102", 45, False),
    ("201", 60, False),
    ("202", 60, False),
    ("LAB-1", 30, True),
    ("LAB-2", 30, True),
]

# (code, name, credit hours, program, type)
COURSES = [
    ("CSE101", "Structured Programming", 3.0, "CSE", CourseType.theory),
    ("CSE102", "Structured Programming Lab", 1.5, "CSE", CourseType.lab),
    ("CSE201", "Data Structures", 3.0, "CSE", CourseType.theory),
    ("CSE202", "Data Structures Lab", 1.5, "CSE", CourseType.lab),
    ("SWE101", "Software Requirements", 3.0, "SWE", CourseType.theory),
    ("EEE101", "Electrical Circuits", 3.0, "EEE", CourseType.theory),
    ("EEE102", "Electrical Circuits Lab", 1.5, "EEE", CourseType.lab),
    ("ME101", "Engineering Mechanics", 3.0, "ME", CourseType.theory),
    ("CEE101", "Surveying", 1.5, "CEE", CourseType.theory),
    ("BTM101", "Principles of Management", 3.0, "BTM", CourseType.theory),
]


def mock_email(name: str) -> str:
    local = ".".join(part.lower() for part in name.split())
    return f"{local}@{MOCK_EMAIL_DOMAIN}"


def upsert_teachers(session) -> None:
    for name in TEACHERS:
        email = mock_email(name)
        existing = session.execute(select(Teacher).where(Teacher.email == email)).scalar_one_or_none()
        if existing is None:
            session.add(Teacher(name=name, email=email))
        else:
            existing.name = name


def upsert_rooms(session) -> None:
    for room_number, capacity, is_lab in ROOMS:
        existing = session.execute(select(Room).where(Room.room_number == room_number)).scalar_one_or_none()
        if existing is None:
            session.add(Room(room_number=room_number, capacity=capacity, is_lab=is_lab))
        else:
            existing.capacity = capacity


def upsert_courses(session) -> None:
    per_unit = get_settings().credit_hours_per_unit
    sections = dict(session.execute(select(Program.code, Program.sections)).all())
    for code, name, credit_hours, program, course_type in COURSES:
        if program not in sections:
            print(f"Skipping {code}: program {program} is not configured")
            continue
        existing = session.execute(select(Course).where(Course.code == code)).scalar_one_or_none()
        if existing is not None:
            # Counters of an existing course are owned by its allocations.
            existing.name = name
            continue
        capacity = course_capacity(credit_hours, sections[program], per_unit)
        session.add(
            Course(
                code=code,
                name=name,
                credit_hours=credit_hours,
                program=program,
                type=course_type,
                allocation_capacity=capacity,
                allocation_availability=capacity,
            )
        )


def main() -> None:
    ensure_runtime_schema(seed=True)
    with SessionLocal() as session:
        upsert_teachers(session)
        upsert_rooms(session)
        upsert_courses(session)
        session.commit()

        teacher_count = session.execute(select(func.count(Teacher.id))).scalar_one()
        room_count = session.execute(select(func.count(Room.id))).scalar_one()
        lab_count = session.execute(select(func.count(Room.id)).where(Room.is_lab == True)).scalar_one()  # noqa: E712
        course_count = session.execute(select(func.count(Course.id))).scalar_one()

    print("University data seeded successfully.")
    print("")
    print(f"Teachers: {teacher_count}")
    print(f"Rooms (classrooms + labs): {room_count} ({lab_count} labs)")
    print(f"Courses: {course_count}")


if __name__ == "__main__":
    main()
