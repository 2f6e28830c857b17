from datetime import time

from sqlalchemy import CheckConstraint, Enum as SAEnum, Integer, Time
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.course import CourseType


class TimeSlot(Base):
    __tablename__ = "time_slots"
    __table_args__ = (CheckConstraint("end_time > start_time", name="ck_time_slots_ordered"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    slot_type: Mapped[CourseType] = mapped_column(SAEnum(CourseType, name="class_type"), nullable=False)
    slot_order: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)

    @property
    def label(self) -> str:
        return f"{self.start_time:%H:%M} - {self.end_time:%H:%M}"

    @property
    def duration_minutes(self) -> int:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return end - start

    def overlaps(self, other: "TimeSlot") -> bool:
        return max(self.start_time, other.start_time) < min(self.end_time, other.end_time)
