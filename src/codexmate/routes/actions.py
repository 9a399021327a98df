"""Action dispatch endpoint used by the Web UI.

The UI posts ``{"action": ..., "params": {...}}`` to ``/api`` and always
gets HTTP 200 back; failures travel as ``{"error": message}``.
"""

import asyncio
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..errors import SessionError
from ..sessions import SessionService
from .sessions import get_session_service

logger = logging.getLogger('codexmate.api')

router = APIRouter(tags=["actions"])


class ActionRequest(BaseModel):
    action: str
    params: Optional[dict[str, Any]] = None


def _text(params: dict, key: str) -> str | None:
    value = params.get(key)
    return value if isinstance(value, str) else None


async def dispatch_action(service: SessionService, action: str, params: dict) -> dict:
    """Run one Web UI action against the session service.

    Listing and deleting block on the filesystem, so they run in the
    default executor.
    """
    loop = asyncio.get_event_loop()
    try:
        if action == 'list-sessions':
            sessions = await loop.run_in_executor(
                None,
                lambda: service.list_sessions(
                    source=params.get('source'),
                    limit=params.get('limit'),
                    force_refresh=bool(params.get('forceRefresh')),
                )
            )
            return {'sessions': sessions}
        if action == 'session-detail':
            return await service.get_session_detail(
                params.get('source'),
                _text(params, 'filePath'),
                _text(params, 'sessionId'),
                params.get('messageLimit'),
            )
        if action == 'export-session':
            return await service.export_session(
                params.get('source'), _text(params, 'filePath'), _text(params, 'sessionId')
            )
        if action == 'delete-session':
            return await loop.run_in_executor(
                None,
                lambda: service.delete_session(
                    params.get('source'), _text(params, 'filePath'), _text(params, 'sessionId')
                )
            )
        if action == 'delete-sessions':
            return await loop.run_in_executor(
                None, lambda: service.delete_sessions_batch(params.get('items'))
            )
    except SessionError as e:
        logger.debug("Action %s failed: %s", action, e.message)
        return e.to_dict()

    return {'error': 'Unknown action'}


@router.post("/api")
async def run_action(
    request: ActionRequest,
    service: SessionService = Depends(get_session_service),
):
    """Dispatch a Web UI action."""
    return await dispatch_action(service, request.action, request.params or {})
