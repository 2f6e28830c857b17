from pydantic import BaseModel, Field, field_validator


class ProgramBase(BaseModel):
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=200)
    sections: int = Field(ge=1, le=50)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()


class ProgramCreate(ProgramBase):
    pass


class ProgramOut(ProgramBase):
    id: str

    model_config = {"from_attributes": True}
