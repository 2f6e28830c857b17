from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db
from app.core.config import Settings, get_settings
from app.schemas.allocation import AllocationCreate, AllocationDetail, AvailabilityDrift
from app.services.allocation import (
    admit_allocation,
    get_allocation,
    list_allocations,
    reconcile_course_availability,
    revoke_allocation,
)

router = APIRouter()


@router.get("/", response_model=list[AllocationDetail])
def get_allocations(db: Session = Depends(get_db)) -> list[AllocationDetail]:
    return list_allocations(db)


@router.post("/", response_model=AllocationDetail, status_code=status.HTTP_201_CREATED)
def create_allocation(
    payload: AllocationCreate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AllocationDetail:
    return admit_allocation(db, payload, settings=settings, actor=actor)


@router.post("/reconcile", response_model=list[AvailabilityDrift])
def reconcile_availability(
    apply: bool = Query(default=False),
    course_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[AvailabilityDrift]:
    return reconcile_course_availability(db, course_id=course_id, apply=apply)


@router.get("/{allocation_id}", response_model=AllocationDetail)
def get_allocation_detail(allocation_id: str, db: Session = Depends(get_db)) -> AllocationDetail:
    return get_allocation(db, allocation_id)


@router.delete("/{allocation_id}")
def delete_allocation(
    allocation_id: str,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    revoke_allocation(db, allocation_id, actor=actor)
    return {"success": True, "message": "Allocation deleted successfully"}
