from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import ConstraintError
from app.models.allocation import Allocation
from app.models.day import Day
from app.models.teacher import Teacher
from app.models.time_slot import TimeSlot


@dataclass(frozen=True)
class WorkloadLimits:
    daily_hours: float
    weekly_hours: float

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkloadLimits":
        return cls(
            daily_hours=settings.teacher_daily_hour_limit,
            weekly_hours=settings.teacher_weekly_hour_limit,
        )


def slot_hours(slot: TimeSlot) -> float:
    return slot.duration_minutes / 60


def units_per_section(credit_hours: float, credit_hours_per_unit: float) -> int:
    # round() absorbs float noise such as 2.9999999 before taking the ceiling
    return max(1, math.ceil(round(credit_hours / credit_hours_per_unit, 6)))


def course_capacity(credit_hours: float, sections: int, credit_hours_per_unit: float) -> int:
    return units_per_section(credit_hours, credit_hours_per_unit) * sections


def teacher_hours(db: Session, teacher_id: str, *, day_id: int | None = None) -> float:
    # One row per allocation, so a slot booked on several days is counted each time.
    stmt = (
        select(Allocation.id, TimeSlot)
        .join(TimeSlot, Allocation.slot_id == TimeSlot.id)
        .where(Allocation.teacher_id == teacher_id)
    )
    if day_id is not None:
        stmt = stmt.where(Allocation.day_id == day_id)
    return sum(slot_hours(slot) for _, slot in db.execute(stmt))


def _format_hours(value: float) -> str:
    return f"{value:g}"


def enforce_workload_ceilings(
    db: Session,
    *,
    teacher: Teacher,
    day: Day,
    slot: TimeSlot,
    limits: WorkloadLimits,
) -> None:
    """Reject a candidate that pushes the teacher over the daily or weekly ceiling.

    Must run after the candidate row is flushed: the sums read back from the
    allocations table already include it.
    """
    candidate = slot_hours(slot)

    attempted_day = teacher_hours(db, teacher.id, day_id=day.id)
    if attempted_day > limits.daily_hours + 1e-9:
        current = attempted_day - candidate
        raise ConstraintError(
            f"Daily workload limit exceeded for {teacher.name} on {day.name}: "
            f"{_format_hours(current)} h allocated, {_format_hours(attempted_day)} h attempted, "
            f"limit {_format_hours(limits.daily_hours)} h.",
            details={
                "rule": "teacher_daily_hours",
                "limit": limits.daily_hours,
                "current": current,
                "attempted": attempted_day,
                "day": day.name,
            },
        )

    attempted_week = teacher_hours(db, teacher.id)
    if attempted_week > limits.weekly_hours + 1e-9:
        current = attempted_week - candidate
        raise ConstraintError(
            f"Weekly workload limit exceeded for {teacher.name}: "
            f"{_format_hours(current)} h allocated, {_format_hours(attempted_week)} h attempted, "
            f"limit {_format_hours(limits.weekly_hours)} h.",
            details={
                "rule": "teacher_weekly_hours",
                "limit": limits.weekly_hours,
                "current": current,
                "attempted": attempted_week,
            },
        )
