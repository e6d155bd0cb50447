"""Chat message endpoints — add, list, delete."""


import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chat_backend.auth.dependencies import enforce_rate_limit, require_api_key
from chat_backend.common.pagination import MessagePagination
from chat_backend.database import get_db
from chat_backend.messages.schemas import (
    MessageCreate,
    MessageCreated,
    MessageListResponse,
)
from chat_backend.messages.service import MessageService

router = APIRouter(
    prefix="",
    tags=["messages"],
    dependencies=[Depends(require_api_key), Depends(enforce_rate_limit)],
)


@router.post("", response_model=MessageCreated, status_code=status.HTTP_201_CREATED)
async def add_message(
    body: MessageCreate,
    db: AsyncSession = Depends(get_db),
):
    """Append a message to a live session."""
    message = await MessageService.add_message(
        db, session_id=body.session_id, role=body.role, content=body.content,
    )
    return MessageCreated(id=message.id)


@router.get("", response_model=MessageListResponse)
async def list_messages(
    session_id: uuid.UUID = Query(..., description="Session to read"),
    pagination: MessagePagination = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await MessageService.list_messages(db, session_id, pagination)


@router.delete("/{message_id}")
async def delete_message(
    message_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    await MessageService.delete_message(db, message_id)
    return {"message": "Message deleted"}
