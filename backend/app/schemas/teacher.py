from pydantic import BaseModel, EmailStr, Field


class TeacherBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(TeacherBase):
    pass


class TeacherOut(TeacherBase):
    id: str

    model_config = {"from_attributes": True}


class DeleteCheck(BaseModel):
    can_delete: bool
    allocation_count: int
    message: str
