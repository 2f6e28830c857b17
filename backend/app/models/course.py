import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, Enum as SAEnum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class CourseType(str, Enum):
    theory = "Theory"
    lab = "Lab"


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("allocation_availability >= 0", name="ck_courses_availability_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    credit_hours: Mapped[float] = mapped_column(Float, nullable=False, default=3.0)
    program: Mapped[str] = mapped_column(
        String(20), ForeignKey("programs.code", onupdate="CASCADE"), index=True, nullable=False
    )
    type: Mapped[CourseType] = mapped_column(SAEnum(CourseType, name="class_type"), nullable=False)
    # Initial capacity: sections x weekly units per section.
    allocation_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Cached allocation_capacity - count(allocations); the allocations table is authoritative.
    allocation_availability: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
