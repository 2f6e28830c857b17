from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.routine import RoutineGrid
from app.services.routine import format_routine

router = APIRouter()


@router.get("/routine", response_model=RoutineGrid)
def get_routine(
    program: str = Query(min_length=1, max_length=20),
    section: int = Query(ge=1),
    db: Session = Depends(get_db),
) -> RoutineGrid:
    return format_routine(db, program, section)
