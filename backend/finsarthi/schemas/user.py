from datetime import datetime

from pydantic import BaseModel, Field

from finsarthi.models.user import UserRole


class UserBase(BaseModel):
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    age: int | None = None
    city: str | None = None
    country: str | None = None
    gender: str | None = None


class UserUpdate(BaseModel):
    full_name: str | None = None
    phone: str | None = Field(default=None, min_length=6, max_length=32)
    age: int | None = Field(default=None, ge=13, le=120)
    city: str | None = None
    country: str | None = None
    gender: str | None = None


class UserPublic(UserBase):
    id: int
    role: UserRole
    is_available: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CoachPublic(BaseModel):
    id: int
    full_name: str | None = None
    age: int | None = None
    city: str | None = None
    country: str | None = None
    gender: str | None = None
    is_available: bool

    class Config:
        from_attributes = True


class AvailabilityUpdate(BaseModel):
    is_available: bool
