from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.course import CourseType
from app.models.day import Day
from app.models.time_slot import TimeSlot
from app.schemas.calendar import DayOut, TimeSlotOut

router = APIRouter()


@router.get("/days", response_model=list[DayOut])
def list_days(db: Session = Depends(get_db)) -> list[DayOut]:
    return list(db.execute(select(Day).order_by(Day.day_order)).scalars())


@router.get("/time-slots", response_model=list[TimeSlotOut])
def list_time_slots(
    slot_type: CourseType | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
) -> list[TimeSlotOut]:
    query = select(TimeSlot).order_by(TimeSlot.slot_order)
    if slot_type is not None:
        query = query.where(TimeSlot.slot_type == slot_type)
    return list(db.execute(query).scalars())
