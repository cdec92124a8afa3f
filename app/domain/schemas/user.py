"""Pydantic schemas for the User entity."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictStr

from app.domain.rules import MAX_FIELD_LENGTH


class UserCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: StrictStr = Field(min_length=1, max_length=MAX_FIELD_LENGTH)
    email: EmailStr
    phone: StrictStr = Field(min_length=1, max_length=MAX_FIELD_LENGTH)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: str
    phone: str
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
