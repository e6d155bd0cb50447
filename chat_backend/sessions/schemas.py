"""Chat session Pydantic schemas for request / response validation."""


import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from chat_backend.common.pagination import PaginationMeta


# ── Requests ────────────────────────────────────────────────────────

class SessionCreate(BaseModel):
    """Body for POST /sessions."""

    user_id: str = Field(..., min_length=1, max_length=200)
    title: Optional[str] = Field(default=None, max_length=500)


class SessionRename(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)


class SessionFavorite(BaseModel):
    favorite: bool


# ── Responses ───────────────────────────────────────────────────────

class SessionCreated(BaseModel):
    id: uuid.UUID


class SessionResponse(BaseModel):
    """Single session in API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: Optional[str] = None
    favorite: bool
    created_at: datetime


class SessionListResponse(BaseModel):
    data: list[SessionResponse]
    meta: PaginationMeta
