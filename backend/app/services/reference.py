"""Reference data reads and the writes that must stay consistent with allocations.

Plain CRUD for rooms and programs lives in the route modules; everything here
either touches allocation rows or the cached course counters.
"""
from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.exceptions import ConflictError, ConstraintError, InvalidReferenceError, NotFoundError, ValidationError
from app.models.allocation import Allocation
from app.models.course import Course
from app.models.program import Program
from app.models.teacher import Teacher
from app.schemas.course import CourseCreate, CourseUpdate
from app.schemas.teacher import DeleteCheck, TeacherCreate, TeacherUpdate
from app.services.audit import log_activity
from app.services.workload import course_capacity

logger = logging.getLogger(__name__)


def resolve(db: Session, model, record_id, label: str, *, for_update: bool = False):
    if record_id is None or record_id == "":
        raise ValidationError(f"{label} id is required")
    if for_update:
        record = db.execute(select(model).where(model.id == record_id).with_for_update()).scalar_one_or_none()
    else:
        record = db.get(model, record_id)
    if record is None:
        raise InvalidReferenceError(label, record_id)
    return record


def get_program(db: Session, code: str) -> Program:
    program = db.execute(select(Program).where(Program.code == code)).scalar_one_or_none()
    if program is None:
        raise InvalidReferenceError("program", code)
    return program


def program_section_count(db: Session, code: str) -> int:
    return get_program(db, code).sections


def course_allocation_count(db: Session, course_id: str) -> int:
    return db.execute(select(func.count(Allocation.id)).where(Allocation.course_id == course_id)).scalar_one()


def refresh_course_availability(db: Session, course: Course) -> int:
    """Rewrite the cached counter from the live allocation rows; callers hold the course lock."""
    db.flush()
    course.allocation_availability = course.allocation_capacity - course_allocation_count(db, course.id)
    return course.allocation_availability


def teacher_allocation_count(db: Session, teacher_id: str) -> int:
    return db.execute(select(func.count(Allocation.id)).where(Allocation.teacher_id == teacher_id)).scalar_one()


def list_courses(db: Session, *, available_only: bool = False) -> list[Course]:
    stmt = select(Course).order_by(Course.code)
    if available_only:
        stmt = stmt.where(Course.allocation_availability > 0)
    return list(db.execute(stmt).scalars())


def get_course(db: Session, course_id: str) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    return course


def create_course(db: Session, payload: CourseCreate, *, settings: Settings | None = None) -> Course:
    settings = settings or get_settings()
    existing = db.execute(select(Course).where(Course.code == payload.code)).scalar_one_or_none()
    if existing:
        raise ConflictError("A course with this code already exists.", details={"code": payload.code})
    program = get_program(db, payload.program)

    capacity = course_capacity(payload.credit_hours, program.sections, settings.credit_hours_per_unit)
    course = Course(
        **payload.model_dump(),
        allocation_capacity=capacity,
        allocation_availability=capacity,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("Created course %s with allocation capacity %d", course.code, capacity)
    return course


def update_course(
    db: Session,
    course_id: str,
    payload: CourseUpdate,
    *,
    settings: Settings | None = None,
) -> Course:
    settings = settings or get_settings()
    course = db.execute(select(Course).where(Course.id == course_id).with_for_update()).scalar_one_or_none()
    if course is None:
        raise NotFoundError("Course", course_id)

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "code" in data:
        existing = db.execute(
            select(Course).where(Course.code == data["code"], Course.id != course_id)
        ).scalar_one_or_none()
        if existing:
            raise ConflictError("A course with this code already exists.", details={"code": data["code"]})

    allocated = course_allocation_count(db, course.id)
    if allocated:
        if data.get("program", course.program) != course.program:
            raise ValidationError(
                "Cannot move a course with allocations to another program; delete its allocations first.",
                details={"allocation_count": allocated},
            )
        if data.get("type", course.type) != course.type:
            raise ValidationError(
                "Cannot change the type of a course with allocations; delete its allocations first.",
                details={"allocation_count": allocated},
            )

    program = get_program(db, data.get("program", course.program))
    capacity = course_capacity(
        data.get("credit_hours", course.credit_hours),
        program.sections,
        settings.credit_hours_per_unit,
    )
    if capacity < allocated:
        raise ConstraintError(
            f"Course {course.code} already has {allocated} allocations; "
            f"the new capacity of {capacity} would be exceeded.",
            details={"rule": "course_capacity", "limit": capacity, "current": allocated},
        )

    for key, value in data.items():
        setattr(course, key, value)
    course.allocation_capacity = capacity
    course.allocation_availability = capacity - allocated
    db.commit()
    db.refresh(course)
    return course


def course_delete_check(db: Session, course_id: str) -> DeleteCheck:
    course = get_course(db, course_id)
    count = course_allocation_count(db, course.id)
    if count:
        message = f"Deleting course {course.code} will also delete {count} allocation(s)."
    else:
        message = f"Course {course.code} has no allocations and can be deleted."
    return DeleteCheck(can_delete=True, allocation_count=count, message=message)


def delete_course(db: Session, course_id: str, *, actor: str | None = None) -> int:
    """Delete a course and its allocations in one transaction; returns the number of allocations removed."""
    try:
        course = db.execute(select(Course).where(Course.id == course_id).with_for_update()).scalar_one_or_none()
        if course is None:
            raise NotFoundError("Course", course_id)
        removed = db.execute(delete(Allocation).where(Allocation.course_id == course.id)).rowcount or 0
        log_activity(
            db,
            actor=actor,
            action="course.deleted",
            entity_type="course",
            entity_id=course.id,
            details={"code": course.code, "allocations_removed": removed},
        )
        db.delete(course)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted course %s and %d allocation(s)", course_id, removed)
    return removed


def list_teachers(db: Session) -> list[Teacher]:
    return list(db.execute(select(Teacher).order_by(Teacher.name)).scalars())


def get_teacher(db: Session, teacher_id: str) -> Teacher:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise NotFoundError("Teacher", teacher_id)
    return teacher


def create_teacher(db: Session, payload: TeacherCreate) -> Teacher:
    existing = db.execute(select(Teacher).where(Teacher.email == payload.email)).scalar_one_or_none()
    if existing:
        raise ConflictError("A teacher with this email already exists", details={"email": payload.email})
    teacher = Teacher(**payload.model_dump())
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return teacher


def update_teacher(db: Session, teacher_id: str, payload: TeacherUpdate) -> Teacher:
    teacher = get_teacher(db, teacher_id)
    existing = db.execute(
        select(Teacher).where(Teacher.email == payload.email, Teacher.id != teacher_id)
    ).scalar_one_or_none()
    if existing:
        raise ConflictError("Email already in use by another teacher", details={"email": payload.email})
    teacher.name = payload.name
    teacher.email = payload.email
    db.commit()
    db.refresh(teacher)
    return teacher


def teacher_delete_check(db: Session, teacher_id: str) -> DeleteCheck:
    teacher = get_teacher(db, teacher_id)
    count = teacher_allocation_count(db, teacher.id)
    if count:
        message = f"Deleting {teacher.name} will also delete {count} allocation(s) from the routine."
    else:
        message = f"{teacher.name} has no allocations and can be deleted."
    return DeleteCheck(can_delete=True, allocation_count=count, message=message)


def delete_teacher(db: Session, teacher_id: str, *, actor: str | None = None) -> int:
    """Delete a teacher together with their allocations; returns the number of allocations removed.

    The courses survive, so each affected course has its cached availability
    recomputed from the remaining allocations in the same transaction. Locks are
    taken teacher first, then courses in id order, matching admission.
    """
    try:
        teacher = db.execute(select(Teacher).where(Teacher.id == teacher_id).with_for_update()).scalar_one_or_none()
        if teacher is None:
            raise NotFoundError("Teacher", teacher_id)

        course_ids = set(
            db.execute(select(Allocation.course_id).where(Allocation.teacher_id == teacher.id)).scalars()
        )
        courses = [resolve(db, Course, course_id, "course", for_update=True) for course_id in sorted(course_ids)]

        removed = db.execute(delete(Allocation).where(Allocation.teacher_id == teacher.id)).rowcount or 0
        for course in courses:
            refresh_course_availability(db, course)
        log_activity(
            db,
            actor=actor,
            action="teacher.deleted",
            entity_type="teacher",
            entity_id=teacher.id,
            details={"email": teacher.email, "allocations_removed": removed},
        )
        db.delete(teacher)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted teacher %s and %d allocation(s)", teacher_id, removed)
    return removed


def teachers_with_allocations(db: Session) -> list[Teacher]:
    stmt = (
        select(Teacher)
        .where(Teacher.id.in_(select(Allocation.teacher_id)))
        .order_by(Teacher.name)
    )
    return list(db.execute(stmt).scalars())


def teacher_for_course(db: Session, course_id: str) -> Teacher | None:
    """The teacher already holding an allocation of the course, used to prefill the wizard."""
    get_course(db, course_id)
    stmt = (
        select(Teacher)
        .join(Allocation, Allocation.teacher_id == Teacher.id)
        .where(Allocation.course_id == course_id)
        .order_by(Allocation.created_at, Allocation.id)
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()
