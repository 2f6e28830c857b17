from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db
from app.core.config import Settings, get_settings
from app.schemas.allocation import SectionAvailability
from app.schemas.course import CourseAvailabilityOut, CourseCreate, CourseOut, CourseTeacherOut, CourseUpdate
from app.schemas.teacher import DeleteCheck
from app.services import reference
from app.services.availability import list_available_sections

router = APIRouter()


@router.get("/", response_model=list[CourseOut])
def list_courses(
    available_only: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> list[CourseOut]:
    return reference.list_courses(db, available_only=available_only)


@router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CourseOut:
    return reference.create_course(db, payload, settings=settings)


@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: str, db: Session = Depends(get_db)) -> CourseOut:
    return reference.get_course(db, course_id)


@router.put("/{course_id}", response_model=CourseOut)
def update_course(
    course_id: str,
    payload: CourseUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CourseOut:
    return reference.update_course(db, course_id, payload, settings=settings)


@router.get("/{course_id}/delete-check", response_model=DeleteCheck)
def check_course_delete(course_id: str, db: Session = Depends(get_db)) -> DeleteCheck:
    return reference.course_delete_check(db, course_id)


@router.delete("/{course_id}")
def delete_course(
    course_id: str,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    removed = reference.delete_course(db, course_id, actor=actor)
    return {"success": True, "allocations_removed": removed}


@router.get("/{course_id}/available-sections", response_model=list[SectionAvailability])
def get_available_sections(
    course_id: str,
    only_open: bool = Query(default=False),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> list[SectionAvailability]:
    return list_available_sections(db, course_id, only_open=only_open, settings=settings)


@router.get("/{course_id}/availability", response_model=CourseAvailabilityOut)
def get_course_availability(course_id: str, db: Session = Depends(get_db)) -> CourseAvailabilityOut:
    course = reference.get_course(db, course_id)
    return CourseAvailabilityOut(course_id=course.id, allocation_availability=course.allocation_availability)


@router.get("/{course_id}/teacher", response_model=CourseTeacherOut)
def get_course_teacher(course_id: str, db: Session = Depends(get_db)) -> CourseTeacherOut:
    teacher = reference.teacher_for_course(db, course_id)
    if teacher is None:
        return CourseTeacherOut(course_id=course_id)
    return CourseTeacherOut(course_id=course_id, teacher_id=teacher.id, teacher_name=teacher.name)
