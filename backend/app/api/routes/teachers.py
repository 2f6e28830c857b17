from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db
from app.schemas.routine import TeacherRoutineEntry
from app.schemas.teacher import DeleteCheck, TeacherCreate, TeacherOut, TeacherUpdate
from app.services import reference
from app.services.routine import format_teacher_routine

router = APIRouter()


@router.get("/", response_model=list[TeacherOut])
def list_teachers(db: Session = Depends(get_db)) -> list[TeacherOut]:
    return reference.list_teachers(db)


@router.get("/with-allocations", response_model=list[TeacherOut])
def list_teachers_with_allocations(db: Session = Depends(get_db)) -> list[TeacherOut]:
    return reference.teachers_with_allocations(db)


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)) -> TeacherOut:
    return reference.create_teacher(db, payload)


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(teacher_id: str, payload: TeacherUpdate, db: Session = Depends(get_db)) -> TeacherOut:
    return reference.update_teacher(db, teacher_id, payload)


@router.get("/{teacher_id}/delete-check", response_model=DeleteCheck)
def check_teacher_delete(teacher_id: str, db: Session = Depends(get_db)) -> DeleteCheck:
    return reference.teacher_delete_check(db, teacher_id)


@router.delete("/{teacher_id}")
def delete_teacher(
    teacher_id: str,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    removed = reference.delete_teacher(db, teacher_id, actor=actor)
    return {"success": True, "allocations_removed": removed}


@router.get("/{teacher_id}/routine", response_model=list[TeacherRoutineEntry])
def get_teacher_routine(teacher_id: str, db: Session = Depends(get_db)) -> list[TeacherRoutineEntry]:
    return format_teacher_routine(db, teacher_id)
