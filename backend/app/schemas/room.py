from pydantic import BaseModel, Field


class RoomBase(BaseModel):
    room_number: str = Field(min_length=1, max_length=50)
    capacity: int = Field(ge=1, le=1000)
    is_lab: bool = False


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    room_number: str | None = Field(default=None, min_length=1, max_length=50)
    capacity: int | None = Field(default=None, ge=1, le=1000)
    is_lab: bool | None = None


class RoomOut(RoomBase):
    id: str

    model_config = {"from_attributes": True}
