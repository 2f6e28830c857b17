from datetime import time

from pydantic import BaseModel, Field, field_validator

from app.models.course import CourseType


class AllocationCreate(BaseModel):
    # Presence and section range are checked by the admission service so a
    # missing field is reported as a 400 listing every absent name.
    teacher_id: str | None = Field(default=None, max_length=36)
    course_id: str | None = Field(default=None, max_length=36)
    room_id: str | None = Field(default=None, max_length=36)
    day_id: int | None = None
    slot_id: int | None = None
    program: str | None = Field(default=None, max_length=20)
    section: int | None = None

    @field_validator("program")
    @classmethod
    def normalize_program(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip().upper()


class AllocationDetail(BaseModel):
    id: str
    teacher_id: str
    teacher_name: str
    course_id: str
    course_code: str
    course_name: str
    course_type: CourseType
    room_id: str
    room_number: str
    is_lab: bool
    day_id: int
    day_name: str
    slot_id: int
    start_time: time
    end_time: time
    slot_type: CourseType
    program: str
    section: int


class SectionAvailability(BaseModel):
    section: int
    max_allocations: int
    allocated: int
    remaining: int


class AvailabilityDrift(BaseModel):
    course_id: str
    course_code: str
    allocation_capacity: int
    allocated: int
    cached_availability: int
    expected_availability: int
    repaired: bool = False
