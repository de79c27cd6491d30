from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_409_CONFLICT

from form_navigator.api.http_logging import install_http_logging
from form_navigator.api.routes.form import router as form_router
from form_navigator.api.routes.health import router as health_router
from form_navigator.api.sessions import SessionStore
from form_navigator.client import FormDataClient
from form_navigator.config import Settings, load_settings
from form_navigator.engine import FormStateError


def _repo_root() -> Path:
    # `src/form_navigator/api/main.py` -> repo root
    return Path(__file__).resolve().parents[3]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, client: Optional[FormDataClient] = None) -> FastAPI:
    if settings is None:
        # Load `.env` + `.env.local` when present (local dev convenience).
        load_dotenv(_repo_root() / ".env", override=False)
        load_dotenv(_repo_root() / ".env.local", override=False)
        settings = load_settings()
    _configure_logging(settings.log_level)

    app = FastAPI(title="form-navigator", version="0.1.0")
    app.state.settings = settings
    app.state.form_client = client or FormDataClient.from_settings(settings)
    app.state.sessions = SessionStore()

    @app.exception_handler(FormStateError)
    async def _form_state_error(request: Request, exc: FormStateError) -> JSONResponse:
        return JSONResponse(
            status_code=HTTP_409_CONFLICT,
            content={"ok": False, "error": "invalid_state", "message": str(exc)},
        )

    app.include_router(health_router)
    app.include_router(form_router)
    install_http_logging(app, settings)
    return app
