"""Chat session endpoints — create, rename, favorite, delete, list."""


import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chat_backend.auth.dependencies import enforce_rate_limit, require_api_key
from chat_backend.common.pagination import SessionPagination
from chat_backend.database import get_db
from chat_backend.sessions.schemas import (
    SessionCreate,
    SessionCreated,
    SessionFavorite,
    SessionListResponse,
    SessionRename,
    SessionResponse,
)
from chat_backend.sessions.service import SessionService

router = APIRouter(
    prefix="",
    tags=["sessions"],
    dependencies=[Depends(require_api_key), Depends(enforce_rate_limit)],
)


# ── POST / — start a session ────────────────────────────────────────

@router.post("", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreate,
    db: AsyncSession = Depends(get_db),
):
    session = await SessionService.create_session(db, user_id=body.user_id, title=body.title)
    return SessionCreated(id=session.id)


# ── GET / — list a user's sessions ──────────────────────────────────

@router.get("", response_model=SessionListResponse)
async def list_sessions(
    user_id: str = Query(..., min_length=1, description="Owner of the session"),
    pagination: SessionPagination = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """List live sessions for a user, favorites first (paginated)."""
    return await SessionService.list_sessions(db, user_id, pagination)


# ── GET /{session_id} ───────────────────────────────────────────────

@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: uuid.UUID,
    user_id: str = Query(..., min_length=1, description="Owner of the session"),
    db: AsyncSession = Depends(get_db),
):
    session = await SessionService.get_session(db, session_id, user_id)
    return SessionResponse.model_validate(session)


# ── PATCH /{session_id}/rename ──────────────────────────────────────

@router.patch("/{session_id}/rename")
async def rename_session(
    session_id: uuid.UUID,
    body: SessionRename,
    user_id: str = Query(..., min_length=1, description="Owner of the session"),
    db: AsyncSession = Depends(get_db),
):
    session = await SessionService.rename_session(db, session_id, user_id, body.title)
    return {"message": "Session renamed", "data": SessionResponse.model_validate(session)}


# ── PATCH /{session_id}/favorite ────────────────────────────────────

@router.patch("/{session_id}/favorite")
async def favorite_session(
    session_id: uuid.UUID,
    body: SessionFavorite,
    user_id: str = Query(..., min_length=1, description="Owner of the session"),
    db: AsyncSession = Depends(get_db),
):
    session = await SessionService.set_favorite(db, session_id, user_id, body.favorite)
    return {"message": "Session updated", "data": SessionResponse.model_validate(session)}


# ── DELETE /{session_id} — soft delete ──────────────────────────────

@router.delete("/{session_id}")
async def delete_session(
    session_id: uuid.UUID,
    user_id: str = Query(..., min_length=1, description="Owner of the session"),
    db: AsyncSession = Depends(get_db),
):
    await SessionService.delete_session(db, session_id, user_id)
    return {"message": "Session deleted"}
