from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FORM_API_URL = "https://dynamic-form-generator-9rl7.onrender.com"


def _env_str(name: str, default: str) -> str:
    v = (os.getenv(name) or "").strip()
    return v or default


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    form_api_url: str = DEFAULT_FORM_API_URL
    log_level: str = "INFO"
    http_log: bool = False
    http_log_headers: bool = False
    http_log_body_max_bytes: int = 4096


def load_settings() -> Settings:
    """
    Read settings from the environment.

    - `FORM_API_URL` base URL of the remote form service
    - `FORM_NAVIGATOR_LOG_LEVEL` root log level for the host service
    - `FORM_NAVIGATOR_HTTP_LOG=1` enables request/response logging
    - `FORM_NAVIGATOR_HTTP_LOG_HEADERS=1` includes (redacted) headers
    - `FORM_NAVIGATOR_HTTP_LOG_BODY_MAX_BYTES=4096` caps captured body bytes
    """
    return Settings(
        form_api_url=_env_str("FORM_API_URL", DEFAULT_FORM_API_URL).rstrip("/"),
        log_level=_env_str("FORM_NAVIGATOR_LOG_LEVEL", "INFO").upper(),
        http_log=_env_bool("FORM_NAVIGATOR_HTTP_LOG", default=False),
        http_log_headers=_env_bool("FORM_NAVIGATOR_HTTP_LOG_HEADERS", default=False),
        http_log_body_max_bytes=max(0, _env_int("FORM_NAVIGATOR_HTTP_LOG_BODY_MAX_BYTES", 4096)),
    )
