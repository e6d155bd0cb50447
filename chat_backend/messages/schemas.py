"""Chat message Pydantic schemas for request / response validation."""


import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from chat_backend.common.constants import MessageRole
from chat_backend.common.pagination import PaginationMeta


class MessageCreate(BaseModel):
    """Body for POST /messages."""

    session_id: uuid.UUID
    role: MessageRole
    content: str = Field(..., min_length=1)


class MessageCreated(BaseModel):
    id: uuid.UUID


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: MessageRole
    content: str
    created_at: datetime


class MessageListResponse(BaseModel):
    """Paginated messages of one session, oldest first."""

    data: list[MessageResponse]
    meta: PaginationMeta
