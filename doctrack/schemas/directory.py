from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from doctrack.models.directory import UserRole


# ---------------------------------------------------------------------------
# Office
# ---------------------------------------------------------------------------


class OfficeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)


class OfficeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    created_at: datetime


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    position: str | None = Field(default=None, max_length=160)
    office: str = Field(min_length=1, max_length=160)
    role: UserRole = UserRole.staff
    avatar_url: str | None = None


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    position: str | None = Field(default=None, max_length=160)
    office: str | None = Field(default=None, min_length=1, max_length=160)
    role: UserRole | None = None
    avatar_url: str | None = None


class UserRead(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    office: str
    role: UserRole
