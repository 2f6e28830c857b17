"""Admission and revocation of allocations.

Both operations run as one transaction on the caller's session: the
allocation row, the owning course's cached ``allocation_availability`` and the
audit record either all commit or all roll back. The counter is rewritten from
the live allocation count on every write, so a drifted value heals instead of
blocking admissions. The store's uniqueness
constraints are the final word on double-booking; the pre-checks here only
turn the common cases into early, descriptive rejections.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.exceptions import AppError, ConflictError, ConstraintError, NotFoundError, ValidationError
from app.models.allocation import ROOM_BOOKING_CONSTRAINT, TEACHER_BOOKING_CONSTRAINT, Allocation
from app.models.course import Course, CourseType
from app.models.day import Day
from app.models.room import Room
from app.models.teacher import Teacher
from app.models.time_slot import TimeSlot
from app.schemas.allocation import AllocationCreate, AllocationDetail, AvailabilityDrift
from app.services.audit import log_activity
from app.services.availability import list_available_rooms, section_allocation_count, validate_section
from app.services.reference import refresh_course_availability, resolve
from app.services.workload import WorkloadLimits, enforce_workload_ceilings, units_per_section

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("teacher_id", "course_id", "room_id", "day_id", "slot_id", "program", "section")


def to_detail(allocation: Allocation) -> AllocationDetail:
    return AllocationDetail(
        id=allocation.id,
        teacher_id=allocation.teacher_id,
        teacher_name=allocation.teacher.name,
        course_id=allocation.course_id,
        course_code=allocation.course.code,
        course_name=allocation.course.name,
        course_type=allocation.course.type,
        room_id=allocation.room_id,
        room_number=allocation.room.room_number,
        is_lab=allocation.room.is_lab,
        day_id=allocation.day_id,
        day_name=allocation.day.name,
        slot_id=allocation.slot_id,
        start_time=allocation.slot.start_time,
        end_time=allocation.slot.end_time,
        slot_type=allocation.slot.slot_type,
        program=allocation.program,
        section=allocation.section,
    )


def list_allocations(db: Session) -> list[AllocationDetail]:
    stmt = (
        select(Allocation)
        .join(Day, Allocation.day_id == Day.id)
        .join(TimeSlot, Allocation.slot_id == TimeSlot.id)
        .order_by(Day.day_order, TimeSlot.slot_order, Allocation.program, Allocation.section)
    )
    return [to_detail(allocation) for allocation in db.execute(stmt).unique().scalars()]


def get_allocation(db: Session, allocation_id: str) -> AllocationDetail:
    allocation = db.get(Allocation, allocation_id)
    if allocation is None:
        raise NotFoundError("Allocation", allocation_id)
    return to_detail(allocation)


def _check_required(payload: AllocationCreate) -> None:
    missing = [name for name in REQUIRED_FIELDS if getattr(payload, name, None) in (None, "")]
    if missing:
        raise ValidationError(
            f"All fields are required; missing: {', '.join(missing)}",
            details={"missing": missing},
        )


def _check_type_compatibility(course: Course, room: Room, slot: TimeSlot) -> None:
    if course.type != slot.slot_type:
        raise ValidationError(
            f"Course type ({course.type.value}) does not match slot type ({slot.slot_type.value}).",
            details={"rule": "slot_type", "course_type": course.type.value, "slot_type": slot.slot_type.value},
        )
    if course.type == CourseType.lab and not room.is_lab:
        raise ValidationError(
            "Lab courses must use Lab rooms.",
            details={"rule": "room_type", "course_type": course.type.value, "room_number": room.room_number},
        )
    if course.type == CourseType.theory and room.is_lab:
        raise ValidationError(
            "Theory courses cannot use Lab rooms.",
            details={"rule": "room_type", "course_type": course.type.value, "room_number": room.room_number},
        )


def _check_room_free(db: Session, course: Course, room: Room, day: Day, slot: TimeSlot) -> None:
    available = {item.id for item in list_available_rooms(db, day.id, slot.id, course.type)}
    if room.id not in available:
        raise ConflictError(
            f"Room {room.room_number} unavailable for {course.type.value} on {day.name} at {slot.label}.",
            details={"rule": "room_booking", "room_id": room.id, "day_id": day.id, "slot_id": slot.id},
        )


def _check_teacher_free(db: Session, teacher: Teacher, day: Day, slot: TimeSlot) -> None:
    # Same-slot clashes are left to the unique constraint; this catches a lab block
    # overlapping a theory period, which are different slot ids.
    booked = db.execute(
        select(TimeSlot)
        .join(Allocation, Allocation.slot_id == TimeSlot.id)
        .where(Allocation.teacher_id == teacher.id, Allocation.day_id == day.id, TimeSlot.id != slot.id)
    ).scalars()
    for other in booked:
        if slot.overlaps(other):
            raise ConflictError(
                f"Teacher already booked at this time: {teacher.name} teaches {other.label} on {day.name}.",
                details={"rule": "teacher_booking", "teacher_id": teacher.id, "day_id": day.id, "slot_id": other.id},
            )


def _conflict_from_integrity_error(exc: IntegrityError) -> AppError:
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None) or ""
    message = f"{constraint} {exc.orig}"
    if TEACHER_BOOKING_CONSTRAINT in message or "allocations.teacher_id" in message:
        return ConflictError("Teacher already booked at this time.", details={"rule": "teacher_booking"})
    if ROOM_BOOKING_CONSTRAINT in message or "allocations.room_id" in message:
        return ConflictError("Room already booked at this time.", details={"rule": "room_booking"})
    if "availability_non_negative" in message or "allocation_availability" in message:
        return ConstraintError(
            "Course has no allocation availability left.",
            details={"rule": "course_availability"},
        )
    return ConflictError("Allocation conflict detected.", details={"rule": "unknown", "error": str(exc.orig)})


def _check_section_quota(db: Session, course: Course, program: str, section: int, settings: Settings) -> None:
    quota = units_per_section(course.credit_hours, settings.credit_hours_per_unit)
    attempted = section_allocation_count(db, course.id, program, section)
    if attempted > quota:
        raise ConstraintError(
            f"Section {section} of {course.code} ({program}) already has {attempted - 1} of "
            f"{quota} weekly classes allocated.",
            details={
                "rule": "section_quota",
                "limit": quota,
                "current": attempted - 1,
                "attempted": attempted,
            },
        )


def admit_allocation(
    db: Session,
    payload: AllocationCreate,
    *,
    settings: Settings | None = None,
    actor: str | None = None,
) -> AllocationDetail:
    settings = settings or get_settings()
    _check_required(payload)
    try:
        # Lock order is teacher, then course, on every write path. The teacher lock
        # serializes workload checks; the course lock serializes its counter.
        teacher = resolve(db, Teacher, payload.teacher_id, "teacher", for_update=True)
        course = resolve(db, Course, payload.course_id, "course", for_update=True)
        room = resolve(db, Room, payload.room_id, "room")
        day = resolve(db, Day, payload.day_id, "day")
        slot = resolve(db, TimeSlot, payload.slot_id, "time slot")

        if payload.program != course.program:
            raise ValidationError(
                f"Course {course.code} belongs to program {course.program}, not {payload.program}.",
                details={"rule": "program", "course_program": course.program, "program": payload.program},
            )
        validate_section(db, course.program, payload.section)
        _check_type_compatibility(course, room, slot)
        _check_room_free(db, course, room, day, slot)
        _check_teacher_free(db, teacher, day, slot)

        allocation = Allocation(
            teacher_id=teacher.id,
            course_id=course.id,
            room_id=room.id,
            day_id=day.id,
            slot_id=slot.id,
            program=payload.program,
            section=payload.section,
        )
        db.add(allocation)
        db.flush()

        _check_section_quota(db, course, payload.program, payload.section, settings)
        enforce_workload_ceilings(
            db,
            teacher=teacher,
            day=day,
            slot=slot,
            limits=WorkloadLimits.from_settings(settings),
        )

        refresh_course_availability(db, course)
        log_activity(
            db,
            actor=actor,
            action="allocation.created",
            entity_type="allocation",
            entity_id=allocation.id,
            details=payload.model_dump(),
        )
        db.flush()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        error = _conflict_from_integrity_error(exc)
        logger.warning("Allocation rejected by store constraint: %s", error.message)
        raise error from exc
    except AppError as exc:
        db.rollback()
        logger.warning("Allocation rejected: %s", exc.message)
        raise
    except Exception:
        db.rollback()
        logger.exception("Allocation admission failed")
        raise

    db.refresh(allocation)
    logger.info(
        "Admitted allocation %s: %s %s section %d, %s %s, room %s; %s availability now %d",
        allocation.id,
        course.code,
        allocation.program,
        allocation.section,
        day.name,
        slot.label,
        room.room_number,
        course.code,
        course.allocation_availability,
    )
    return to_detail(allocation)


def revoke_allocation(db: Session, allocation_id: str, *, actor: str | None = None) -> None:
    try:
        allocation = db.execute(
            select(Allocation).where(Allocation.id == allocation_id).with_for_update(of=Allocation)
        ).unique().scalar_one_or_none()
        if allocation is None:
            raise NotFoundError("Allocation", allocation_id)

        resolve(db, Teacher, allocation.teacher_id, "teacher", for_update=True)
        course = resolve(db, Course, allocation.course_id, "course", for_update=True)
        details = to_detail(allocation).model_dump(mode="json")
        db.delete(allocation)
        refresh_course_availability(db, course)
        log_activity(
            db,
            actor=actor,
            action="allocation.deleted",
            entity_type="allocation",
            entity_id=allocation_id,
            details=details,
        )
        db.commit()
    except AppError as exc:
        db.rollback()
        logger.warning("Allocation revocation rejected: %s", exc.message)
        raise
    except Exception:
        db.rollback()
        logger.exception("Allocation revocation failed")
        raise
    logger.info(
        "Revoked allocation %s; %s availability now %d",
        allocation_id,
        course.code,
        course.allocation_availability,
    )


def reconcile_course_availability(
    db: Session,
    *,
    course_id: str | None = None,
    apply: bool = False,
) -> list[AvailabilityDrift]:
    """Compare cached counters with live allocation counts.

    Returns one entry per drifting course. With ``apply`` the counters are
    rewritten from the live counts, which are authoritative.
    """
    counts = dict(
        db.execute(select(Allocation.course_id, func.count(Allocation.id)).group_by(Allocation.course_id)).all()
    )
    stmt = select(Course).order_by(Course.code)
    if course_id is not None:
        if db.get(Course, course_id) is None:
            raise NotFoundError("Course", course_id)
        stmt = stmt.where(Course.id == course_id)
    if apply:
        stmt = stmt.with_for_update()

    drifts: list[AvailabilityDrift] = []
    for course in db.execute(stmt).scalars():
        allocated = counts.get(course.id, 0)
        expected = course.allocation_capacity - allocated
        if expected == course.allocation_availability:
            continue
        drift = AvailabilityDrift(
            course_id=course.id,
            course_code=course.code,
            allocation_capacity=course.allocation_capacity,
            allocated=allocated,
            cached_availability=course.allocation_availability,
            expected_availability=expected,
        )
        if apply and expected >= 0:
            course.allocation_availability = expected
            drift.repaired = True
        drifts.append(drift)

    if apply:
        db.commit()
    if drifts:
        logger.warning("Found %d course(s) with drifting allocation availability", len(drifts))
    return drifts
