from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.allocation import Allocation  # noqa: F401
from app.models.course import Course, CourseType  # noqa: F401
from app.models.day import Day  # noqa: F401
from app.models.program import Program  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.teacher import Teacher  # noqa: F401
from app.models.time_slot import TimeSlot  # noqa: F401
