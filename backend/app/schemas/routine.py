from datetime import time

from pydantic import BaseModel

from app.models.course import CourseType


class RoutineCell(BaseModel):
    allocation_id: str
    course_code: str
    course_name: str
    room_number: str
    teacher_name: str
    start_time: time
    end_time: time
    slot_type: CourseType
    row_span: int = 1


# day name -> slot label -> cell, both in display order
RoutineGrid = dict[str, dict[str, RoutineCell]]


class TeacherRoutineEntry(BaseModel):
    allocation_id: str
    day: str
    slot_label: str
    start_time: time
    end_time: time
    room_number: str
    course_code: str
    course_name: str
    course_type: CourseType
    credit_hours: float
    program: str
    section: int
