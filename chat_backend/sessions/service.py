"""Chat session service — create, rename, favorite, soft delete, list."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chat_backend.common.exceptions import NotFoundException
from chat_backend.common.pagination import PaginationParams, paginate
from chat_backend.sessions.models import ChatSession
from chat_backend.sessions.schemas import SessionListResponse, SessionResponse


class SessionService:
    """Async chat-session operations, always scoped to the owning user."""

    @staticmethod
    async def create_session(
        db: AsyncSession,
        *,
        user_id: str,
        title: Optional[str] = None,
    ) -> ChatSession:
        session = ChatSession(user_id=user_id, title=title)
        db.add(session)
        await db.flush()
        return session

    @staticmethod
    async def get_session(
        db: AsyncSession,
        session_id: uuid.UUID,
        user_id: str,
    ) -> ChatSession:
        """Return a live session owned by *user_id* or raise NotFoundException.

        Another user's session is reported as missing, not forbidden.
        """
        result = await db.execute(
            select(ChatSession).where(
                ChatSession.id == session_id,
                ChatSession.user_id == user_id,
                ChatSession.deleted_at.is_(None),
            )
        )
        session = result.scalars().first()
        if session is None:
            raise NotFoundException("Session", session_id)
        return session

    @staticmethod
    async def rename_session(
        db: AsyncSession,
        session_id: uuid.UUID,
        user_id: str,
        title: str,
    ) -> ChatSession:
        session = await SessionService.get_session(db, session_id, user_id)
        session.title = title
        await db.flush()
        return session

    @staticmethod
    async def set_favorite(
        db: AsyncSession,
        session_id: uuid.UUID,
        user_id: str,
        favorite: bool,
    ) -> ChatSession:
        session = await SessionService.get_session(db, session_id, user_id)
        session.favorite = favorite
        await db.flush()
        return session

    @staticmethod
    async def delete_session(
        db: AsyncSession,
        session_id: uuid.UUID,
        user_id: str,
    ) -> None:
        """Soft delete: the row stays, stamped with deleted_at."""
        session = await SessionService.get_session(db, session_id, user_id)
        session.deleted_at = datetime.now(timezone.utc)
        await db.flush()

    @staticmethod
    async def list_sessions(
        db: AsyncSession,
        user_id: str,
        pagination: PaginationParams,
    ) -> SessionListResponse:
        """Live sessions of a user — favorites first, then newest first."""
        query = (
            select(ChatSession)
            .where(
                ChatSession.user_id == user_id,
                ChatSession.deleted_at.is_(None),
            )
            .order_by(ChatSession.favorite.desc(), ChatSession.created_at.desc())
        )
        rows, meta = await paginate(db, query, pagination)
        return SessionListResponse(
            data=[SessionResponse.model_validate(s) for s in rows],
            meta=meta,
        )
