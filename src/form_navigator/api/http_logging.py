from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from form_navigator.config import Settings

logger = logging.getLogger("form_navigator.http")


_SENSITIVE_KEYS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "token",
    "secret",
    "password",
}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in _SENSITIVE_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _decode_headers(headers: Iterable[Tuple[bytes, bytes]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in headers:
        key = k.decode("latin-1").lower()
        out[key] = "***" if key in _SENSITIVE_KEYS else v.decode("latin-1")
    return out


def _header(headers: Iterable[Tuple[bytes, bytes]], name: bytes) -> str:
    for k, v in headers:
        if k.lower() == name:
            return v.decode("latin-1")
    return ""


def _parse_body(content_type: str, body: bytes) -> Any:
    if not body:
        return ""
    if "application/json" in (content_type or "").lower():
        try:
            return _redact(json.loads(body.decode("utf-8", errors="replace")))
        except ValueError:
            pass
    return body.decode("utf-8", errors="replace")


class HttpLoggingMiddleware:
    """Logs one JSON line per HTTP request: method, path, status, timing, bodies."""

    def __init__(self, app: ASGIApp, *, log_headers: bool, max_body_bytes: int) -> None:
        self.app = app
        self.log_headers = log_headers
        self.max_body_bytes = max(0, max_body_bytes)

    def _capture(self, buf: bytearray, chunk: bytes) -> bool:
        remaining = self.max_body_bytes - len(buf)
        if remaining > 0:
            buf.extend(chunk[:remaining])
        return len(chunk) > max(remaining, 0)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        req_headers: List[Tuple[bytes, bytes]] = list(scope.get("headers") or [])
        request_id = _header(req_headers, b"x-request-id") or uuid.uuid4().hex[:12]

        req_body = bytearray()
        res_body = bytearray()
        res_headers: List[Tuple[bytes, bytes]] = []
        res_status: Optional[int] = None
        truncated = False

        async def receive_wrapped() -> Message:
            nonlocal truncated
            message = await receive()
            if message.get("type") == "http.request" and self.max_body_bytes:
                truncated = self._capture(req_body, message.get("body") or b"") or truncated
            return message

        async def send_wrapped(message: Message) -> None:
            nonlocal res_status, res_headers, truncated
            if message.get("type") == "http.response.start":
                res_status = int(message.get("status") or 0)
                res_headers = list(message.get("headers") or [])
            elif message.get("type") == "http.response.body" and self.max_body_bytes:
                truncated = self._capture(res_body, message.get("body") or b"") or truncated
            await send(message)

        err: Optional[BaseException] = None
        try:
            await self.app(scope, receive_wrapped, send_wrapped)
        except BaseException as e:  # noqa: BLE001 - logged below, then re-raised
            err = e
            raise
        finally:
            record: Dict[str, Any] = {
                "id": request_id,
                "method": str(scope.get("method") or "").upper(),
                "path": str(scope.get("path") or ""),
                "query": (scope.get("query_string") or b"").decode("latin-1", errors="ignore"),
                "status": res_status,
                "dur_ms": int((time.perf_counter() - started_at) * 1000),
                "request": _parse_body(_header(req_headers, b"content-type"), bytes(req_body)),
                "response": _parse_body(_header(res_headers, b"content-type"), bytes(res_body)),
                "body_truncated": truncated,
            }
            if self.log_headers:
                record["request_headers"] = _decode_headers(req_headers)
                record["response_headers"] = _decode_headers(res_headers)
            if err is not None:
                record["error"] = {"type": type(err).__name__, "message": str(err)}
            logger.info(json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str))


def install_http_logging(app: Any, settings: Settings) -> None:
    """Attach `HttpLoggingMiddleware` when `FORM_NAVIGATOR_HTTP_LOG` is on."""
    if not settings.http_log:
        return
    app.add_middleware(
        HttpLoggingMiddleware,
        log_headers=settings.http_log_headers,
        max_body_bytes=settings.http_log_body_max_bytes,
    )
