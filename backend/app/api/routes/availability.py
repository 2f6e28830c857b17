from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.course import CourseType
from app.schemas.calendar import DayOut, TimeSlotOut
from app.schemas.room import RoomOut
from app.services.availability import list_available_days, list_available_rooms, list_available_time_slots

router = APIRouter()


@router.get("/days", response_model=list[DayOut])
def available_days(
    course_id: str = Query(min_length=1),
    section: int = Query(ge=1),
    db: Session = Depends(get_db),
) -> list[DayOut]:
    return list_available_days(db, course_id, section)


@router.get("/time-slots", response_model=list[TimeSlotOut])
def available_time_slots(
    day_id: int = Query(),
    section: int = Query(ge=1),
    program: str = Query(min_length=1, max_length=20),
    course_id: str = Query(min_length=1),
    db: Session = Depends(get_db),
) -> list[TimeSlotOut]:
    return list_available_time_slots(db, day_id, section, program, course_id)


@router.get("/rooms", response_model=list[RoomOut])
def available_rooms(
    day_id: int = Query(),
    slot_id: int = Query(),
    course_type: CourseType | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[RoomOut]:
    return list_available_rooms(db, day_id, slot_id, course_type)
