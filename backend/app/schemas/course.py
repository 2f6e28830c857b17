from pydantic import BaseModel, Field, field_validator

from app.models.course import CourseType

ALLOWED_CREDIT_HOURS = (1.5, 3.0)


def _validate_credit_hours(value: float) -> float:
    if value not in ALLOWED_CREDIT_HOURS:
        allowed = ", ".join(str(item) for item in ALLOWED_CREDIT_HOURS)
        raise ValueError(f"credit_hours must be one of {allowed}")
    return value


class CourseBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    credit_hours: float
    program: str = Field(min_length=1, max_length=20)
    type: CourseType

    @field_validator("code", "program")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("credit_hours")
    @classmethod
    def validate_credit_hours(cls, value: float) -> float:
        return _validate_credit_hours(value)


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    credit_hours: float | None = None
    program: str | None = Field(default=None, min_length=1, max_length=20)
    type: CourseType | None = None

    @field_validator("code", "program")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None

    @field_validator("credit_hours")
    @classmethod
    def validate_credit_hours(cls, value: float | None) -> float | None:
        return _validate_credit_hours(value) if value is not None else None


class CourseOut(CourseBase):
    id: str
    allocation_capacity: int
    allocation_availability: int

    model_config = {"from_attributes": True}


class CourseAvailabilityOut(BaseModel):
    course_id: str
    allocation_availability: int


class CourseTeacherOut(BaseModel):
    course_id: str
    teacher_id: str | None = None
    teacher_name: str | None = None
