from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter, Request

from form_navigator.api.sessions import SessionStore

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> Dict[str, Any]:
    """Liveness plus the number of form sessions this process holds in memory."""
    sessions: SessionStore = request.app.state.sessions
    return {
        "ok": True,
        "service": "form-navigator",
        "sessions": len(sessions),
        "formApi": request.app.state.settings.form_api_url,
        "ts": int(time.time() * 1000),
    }
