from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.allocation import Allocation
from app.models.room import Room
from app.schemas.room import RoomCreate, RoomOut, RoomUpdate

router = APIRouter()


@router.get("/", response_model=list[RoomOut])
def list_rooms(db: Session = Depends(get_db)) -> list[RoomOut]:
    return list(db.execute(select(Room).order_by(Room.room_number)).scalars())


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(payload: RoomCreate, db: Session = Depends(get_db)) -> RoomOut:
    existing = db.execute(select(Room).where(Room.room_number == payload.room_number)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room number already exists")
    room = Room(**payload.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@router.put("/{room_id}", response_model=RoomOut)
def update_room(room_id: str, payload: RoomUpdate, db: Session = Depends(get_db)) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "room_number" in data:
        existing = db.execute(
            select(Room).where(Room.room_number == data["room_number"], Room.id != room_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room number already exists")
    if "is_lab" in data and data["is_lab"] != room.is_lab and _booking_count(db, room_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot change the lab flag of a room with allocations",
        )

    for key, value in data.items():
        setattr(room, key, value)
    db.commit()
    db.refresh(room)
    return room


@router.delete("/{room_id}")
def delete_room(room_id: str, db: Session = Depends(get_db)) -> dict:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    if _booking_count(db, room_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room has allocations and cannot be deleted")
    db.delete(room)
    db.commit()
    return {"success": True}


def _booking_count(db: Session, room_id: str) -> int:
    return db.execute(select(func.count(Allocation.id)).where(Allocation.room_id == room_id)).scalar_one()
