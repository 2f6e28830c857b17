from __future__ import annotations

from datetime import time

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.allocation import Allocation
from app.models.course import CourseType
from app.models.day import Day
from app.models.time_slot import TimeSlot
from app.schemas.routine import RoutineCell, RoutineGrid, TeacherRoutineEntry
from app.services.reference import get_teacher


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def display_row_span(start: time, end: time, rows: list[tuple[time, time]]) -> int:
    """Number of consecutive display rows a period covers, for merging a lab block into one cell."""
    start_minutes, end_minutes = _minutes(start), _minutes(end)
    covered = [
        row
        for row in rows
        if max(start_minutes, _minutes(row[0])) < min(end_minutes, _minutes(row[1]))
    ]
    return max(len(covered), 1)


def canonical_display_rows(db: Session) -> list[tuple[time, time]]:
    """Theory periods in order; lab blocks are rendered across them."""
    slots = db.execute(select(TimeSlot).order_by(TimeSlot.slot_order)).scalars()
    return sorted({(slot.start_time, slot.end_time) for slot in slots if slot.slot_type == CourseType.theory})


def _ordered_allocations(db: Session, *conditions) -> list[Allocation]:
    stmt = (
        select(Allocation)
        .join(Day, Allocation.day_id == Day.id)
        .join(TimeSlot, Allocation.slot_id == TimeSlot.id)
        .where(*conditions)
        .order_by(Day.day_order, TimeSlot.slot_order)
    )
    return list(db.execute(stmt).unique().scalars())


def format_routine(db: Session, program: str, section: int) -> RoutineGrid:
    program = (program or "").strip().upper()
    if not program or not section:
        raise ValidationError("Program and Section are required")

    rows = canonical_display_rows(db)
    grid: RoutineGrid = {}
    for allocation in _ordered_allocations(db, Allocation.program == program, Allocation.section == section):
        slot = allocation.slot
        grid.setdefault(allocation.day.name, {})[slot.label] = RoutineCell(
            allocation_id=allocation.id,
            course_code=allocation.course.code,
            course_name=allocation.course.name,
            room_number=allocation.room.room_number,
            teacher_name=allocation.teacher.name,
            start_time=slot.start_time,
            end_time=slot.end_time,
            slot_type=slot.slot_type,
            row_span=display_row_span(slot.start_time, slot.end_time, rows),
        )
    return grid


def format_teacher_routine(db: Session, teacher_id: str) -> list[TeacherRoutineEntry]:
    teacher = get_teacher(db, teacher_id)
    return [
        TeacherRoutineEntry(
            allocation_id=allocation.id,
            day=allocation.day.name,
            slot_label=allocation.slot.label,
            start_time=allocation.slot.start_time,
            end_time=allocation.slot.end_time,
            room_number=allocation.room.room_number,
            course_code=allocation.course.code,
            course_name=allocation.course.name,
            course_type=allocation.course.type,
            credit_hours=allocation.course.credit_hours,
            program=allocation.program,
            section=allocation.section,
        )
        for allocation in _ordered_allocations(db, Allocation.teacher_id == teacher.id)
    ]
