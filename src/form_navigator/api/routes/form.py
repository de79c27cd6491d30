from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from form_navigator.api.models import FieldEditRequest, LoginRequest, SessionResponse
from form_navigator.api.sessions import SessionStore
from form_navigator.client import FormDataClient, RegistrationError
from form_navigator.engine import FormEngine
from form_navigator.schemas.form import User

router = APIRouter(prefix="/api", tags=["form"])


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error, "message": message})


def _sessions(request: Request) -> SessionStore:
    return request.app.state.sessions


def _engine(request: Request, session_id: str) -> FormEngine:
    engine = _sessions(request).get(session_id)
    if engine is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Session not found")
    return engine


def _view(session_id: str, engine: FormEngine, **extra: Any) -> Dict[str, Any]:
    out = SessionResponse.from_engine(session_id, engine).model_dump(by_alias=True)
    out.update(extra)
    return out


@router.post("/login")
async def login(request: Request, body: LoginRequest = Body(...)) -> Any:
    """
    Register the respondent, open a form session and load its schema.

    A registration failure is returned as-is to the login step. A schema load
    failure still opens the session, in state `failed_to_load`.
    """
    client: FormDataClient = request.app.state.form_client
    user = User(roll_number=body.roll_number, name=body.name)
    try:
        confirmation = await client.register_user(user)
    except RegistrationError as e:
        return _error(HTTP_400_BAD_REQUEST, "registration_failed", e.message)

    engine = FormEngine(user, client)
    session_id = _sessions(request).open(engine)
    await engine.load()
    return _view(session_id, engine, message=confirmation.message)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, request: Request) -> Dict[str, Any]:
    return _view(session_id, _engine(request, session_id))


@router.patch("/sessions/{session_id}/values")
async def edit_value(session_id: str, request: Request, body: FieldEditRequest = Body(...)) -> Any:
    engine = _engine(request, session_id)
    view = engine.field_view(body.field_id)
    if view.change(body.value) is None:
        return _error(HTTP_409_CONFLICT, "not_editable", view.notice or f"Field {body.field_id} is not editable")
    return _view(session_id, engine)


@router.post("/sessions/{session_id}/next")
async def next_section(session_id: str, request: Request) -> Dict[str, Any]:
    engine = _engine(request, session_id)
    advanced = engine.next()
    return _view(session_id, engine, advanced=advanced)


@router.post("/sessions/{session_id}/previous")
async def previous_section(session_id: str, request: Request) -> Dict[str, Any]:
    engine = _engine(request, session_id)
    engine.previous()
    return _view(session_id, engine)


@router.post("/sessions/{session_id}/submit")
async def submit(session_id: str, request: Request) -> Dict[str, Any]:
    engine = _engine(request, session_id)
    payload = engine.submit()
    return _view(session_id, engine, submitted=payload is not None)


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str, request: Request) -> Dict[str, Any]:
    if not _sessions(request).close(session_id):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Session not found")
    return {"ok": True}
