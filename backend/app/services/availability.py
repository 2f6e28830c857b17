"""Read-only calculators behind each step of the allocation wizard.

Every function reads the committed allocations afresh and returns the choices
that remain at one step (course -> section -> day -> slot -> room). They keep
no state between calls, so the steps can be queried in any order and repeated
calls against the same allocation set return the same answer.
"""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.exceptions import ValidationError
from app.models.allocation import Allocation
from app.models.course import Course, CourseType
from app.models.day import Day
from app.models.room import Room
from app.models.time_slot import TimeSlot
from app.schemas.allocation import SectionAvailability
from app.services.reference import program_section_count, resolve
from app.services.workload import units_per_section


def validate_section(db: Session, program: str, section: int) -> int:
    section_count = program_section_count(db, program)
    if section < 1 or section > section_count:
        raise ValidationError(
            f"Section {section} does not exist for program {program} (sections 1-{section_count}).",
            details={"section": section, "section_count": section_count, "program": program},
        )
    return section_count


def section_allocation_count(db: Session, course_id: str, program: str, section: int) -> int:
    return db.execute(
        select(func.count(Allocation.id)).where(
            Allocation.course_id == course_id,
            Allocation.program == program,
            Allocation.section == section,
        )
    ).scalar_one()


def list_available_sections(
    db: Session,
    course_id: str,
    *,
    only_open: bool = False,
    settings: Settings | None = None,
) -> list[SectionAvailability]:
    settings = settings or get_settings()
    course = resolve(db, Course, course_id, "course")
    section_count = program_section_count(db, course.program)
    quota = units_per_section(course.credit_hours, settings.credit_hours_per_unit)

    counts = dict(
        db.execute(
            select(Allocation.section, func.count(Allocation.id))
            .where(Allocation.course_id == course.id, Allocation.program == course.program)
            .group_by(Allocation.section)
        ).all()
    )
    sections = []
    for number in range(1, section_count + 1):
        allocated = counts.get(number, 0)
        entry = SectionAvailability(
            section=number,
            max_allocations=quota,
            allocated=allocated,
            remaining=max(quota - allocated, 0),
        )
        if only_open and entry.remaining == 0:
            continue
        sections.append(entry)
    return sections


def list_available_days(db: Session, course_id: str, section: int) -> list[Day]:
    course = resolve(db, Course, course_id, "course")
    validate_section(db, course.program, section)

    used_day_ids = set(
        db.execute(
            select(Allocation.day_id).where(
                Allocation.course_id == course.id,
                Allocation.section == section,
            )
        ).scalars()
    )
    days = db.execute(select(Day).order_by(Day.day_order)).scalars()
    return [day for day in days if day.id not in used_day_ids]


def list_available_time_slots(
    db: Session,
    day_id: int,
    section: int,
    program: str,
    course_id: str,
) -> list[TimeSlot]:
    day = resolve(db, Day, day_id, "day")
    course = resolve(db, Course, course_id, "course")
    program = (program or "").strip().upper()
    validate_section(db, program, section)

    booked = list(
        db.execute(
            select(TimeSlot)
            .join(Allocation, Allocation.slot_id == TimeSlot.id)
            .where(
                Allocation.day_id == day.id,
                Allocation.section == section,
                Allocation.program == program,
            )
        ).scalars()
    )
    candidates = db.execute(
        select(TimeSlot).where(TimeSlot.slot_type == course.type).order_by(TimeSlot.slot_order)
    ).scalars()
    # A lab block and the theory periods it covers are different slots, so overlap is checked by time.
    return [slot for slot in candidates if not any(slot.overlaps(other) for other in booked)]


def list_available_rooms(
    db: Session,
    day_id: int,
    slot_id: int,
    course_type: CourseType | None = None,
) -> list[Room]:
    day = resolve(db, Day, day_id, "day")
    slot = resolve(db, TimeSlot, slot_id, "time slot")
    wanted_type = course_type or slot.slot_type

    booked_room_ids = select(Allocation.room_id).where(
        Allocation.day_id == day.id,
        Allocation.slot_id == slot.id,
    )
    stmt = (
        select(Room)
        .where(Room.is_lab == (wanted_type == CourseType.lab))
        .where(Room.id.not_in(booked_room_ids))
        .order_by(Room.room_number)
    )
    return list(db.execute(stmt).scalars())
