"""Chat message service — add, list, soft delete."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chat_backend.common.constants import MessageRole
from chat_backend.common.exceptions import NotFoundException
from chat_backend.common.pagination import PaginationParams, paginate
from chat_backend.messages.models import ChatMessage
from chat_backend.messages.schemas import MessageListResponse, MessageResponse
from chat_backend.sessions.models import ChatSession


class MessageService:
    """Async chat-message operations."""

    @staticmethod
    async def _require_live_session(db: AsyncSession, session_id: uuid.UUID) -> None:
        result = await db.execute(
            select(ChatSession.id).where(
                ChatSession.id == session_id,
                ChatSession.deleted_at.is_(None),
            )
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundException("Session", session_id)

    @staticmethod
    async def add_message(
        db: AsyncSession,
        *,
        session_id: uuid.UUID,
        role: MessageRole,
        content: str,
    ) -> ChatMessage:
        await MessageService._require_live_session(db, session_id)
        message = ChatMessage(session_id=session_id, role=role, content=content)
        db.add(message)
        await db.flush()
        return message

    @staticmethod
    async def list_messages(
        db: AsyncSession,
        session_id: uuid.UUID,
        pagination: PaginationParams,
    ) -> MessageListResponse:
        """Live messages of a session in conversation order (oldest first)."""
        query = (
            select(ChatMessage)
            .where(
                ChatMessage.session_id == session_id,
                ChatMessage.deleted_at.is_(None),
            )
            .order_by(ChatMessage.created_at.asc())
        )
        rows, meta = await paginate(db, query, pagination)
        return MessageListResponse(
            data=[MessageResponse.model_validate(m) for m in rows],
            meta=meta,
        )

    @staticmethod
    async def delete_message(db: AsyncSession, message_id: uuid.UUID) -> None:
        """Soft delete; deleting twice reports the message as missing."""
        result = await db.execute(
            select(ChatMessage).where(
                ChatMessage.id == message_id,
                ChatMessage.deleted_at.is_(None),
            )
        )
        message = result.scalars().first()
        if message is None:
            raise NotFoundException("Message", message_id)
        message.deleted_at = datetime.now(timezone.utc)
        await db.flush()
