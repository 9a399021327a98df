"""Session browsing routes."""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..errors import SessionError
from ..sessions import SessionService

logger = logging.getLogger('codexmate.api')

router = APIRouter(prefix="/api", tags=["sessions"])


class DeleteItem(BaseModel):
    source: str = ""
    sessionId: str = ""
    filePath: str = ""


class BatchDeleteRequest(BaseModel):
    items: list[DeleteItem] = Field(default_factory=list)


def get_session_service(request: Request) -> SessionService:
    service = getattr(request.app.state, "session_service", None)
    if service is None:
        raise HTTPException(503, "Session service not initialized")
    return service


def _http_error(error: SessionError) -> HTTPException:
    logger.debug("Session request failed (%d): %s", error.status_code, error.message)
    return HTTPException(error.status_code, error.message)


@router.get("/sessions")
def list_sessions(
    source: str = "all",
    limit: Optional[int] = None,
    refresh: bool = False,
    service: SessionService = Depends(get_session_service),
):
    """List recent sessions from one log family or both."""
    sessions = service.list_sessions(source=source, limit=limit, force_refresh=refresh)
    return {
        "sessions": sessions,
        "count": len(sessions),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/sessions/{source}/detail")
async def get_session_detail(
    source: str,
    sessionId: Optional[str] = None,
    filePath: Optional[str] = None,
    messageLimit: Optional[int] = None,
    service: SessionService = Depends(get_session_service),
):
    """Get the most recent messages of one session."""
    try:
        return await service.get_session_detail(source, filePath, sessionId, messageLimit)
    except SessionError as e:
        raise _http_error(e)


@router.get("/sessions/{source}/export")
async def export_session(
    source: str,
    sessionId: Optional[str] = None,
    filePath: Optional[str] = None,
    service: SessionService = Depends(get_session_service),
):
    """Export one session as Markdown."""
    try:
        return await service.export_session(source, filePath, sessionId)
    except SessionError as e:
        raise _http_error(e)


@router.delete("/sessions/{source}")
def delete_session(
    source: str,
    sessionId: Optional[str] = None,
    filePath: Optional[str] = None,
    service: SessionService = Depends(get_session_service),
):
    """Delete one session file."""
    try:
        return service.delete_session(source, filePath, sessionId)
    except SessionError as e:
        raise _http_error(e)


@router.post("/sessions/delete")
def delete_sessions(
    request: BatchDeleteRequest,
    service: SessionService = Depends(get_session_service),
):
    """Delete several session files; per-item failures are reported, not raised."""
    items = [item.model_dump() for item in request.items]
    try:
        return service.delete_sessions_batch(items)
    except SessionError as e:
        raise _http_error(e)
