import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.course import Course
from app.models.day import Day
from app.models.room import Room
from app.models.teacher import Teacher
from app.models.time_slot import TimeSlot

ROOM_BOOKING_CONSTRAINT = "uq_allocations_room_day_slot"
TEACHER_BOOKING_CONSTRAINT = "uq_allocations_teacher_day_slot"


class Allocation(Base):
    """One committed (teacher, course, room, day, slot, program, section) fact.

    Rows are only inserted by the admission engine and only removed by the
    revocation engine or a teacher/course cascade; they are never updated.
    """

    __tablename__ = "allocations"
    __table_args__ = (
        UniqueConstraint("room_id", "day_id", "slot_id", name=ROOM_BOOKING_CONSTRAINT),
        UniqueConstraint("teacher_id", "day_id", "slot_id", name=TEACHER_BOOKING_CONSTRAINT),
        CheckConstraint("section >= 1", name="ck_allocations_section_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    teacher_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("teachers.id", ondelete="CASCADE"), index=True, nullable=False
    )
    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    room_id: Mapped[str] = mapped_column(String(36), ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False)
    day_id: Mapped[int] = mapped_column(Integer, ForeignKey("days.id", ondelete="RESTRICT"), nullable=False)
    slot_id: Mapped[int] = mapped_column(Integer, ForeignKey("time_slots.id", ondelete="RESTRICT"), nullable=False)
    program: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    section: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    teacher: Mapped[Teacher] = relationship(lazy="joined", innerjoin=True)
    course: Mapped[Course] = relationship(lazy="joined", innerjoin=True)
    room: Mapped[Room] = relationship(lazy="joined", innerjoin=True)
    day: Mapped[Day] = relationship(lazy="joined", innerjoin=True)
    slot: Mapped[TimeSlot] = relationship(lazy="joined", innerjoin=True)
