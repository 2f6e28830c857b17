from datetime import time

from pydantic import BaseModel

from app.models.course import CourseType


class DayOut(BaseModel):
    id: int
    name: str
    day_order: int

    model_config = {"from_attributes": True}


class TimeSlotOut(BaseModel):
    id: int
    start_time: time
    end_time: time
    slot_type: CourseType
    slot_order: int
    label: str

    model_config = {"from_attributes": True}
