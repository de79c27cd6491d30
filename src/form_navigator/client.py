"""
Async HTTP client for the remote form service.

Two calls, no retries, no caching, and aiohttp's default timeout. Failures
surface as `FetchError` / `RegistrationError` carrying the server's `message`
when one is available.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Type

import aiohttp
from pydantic import ValidationError

from form_navigator.config import DEFAULT_FORM_API_URL, Settings
from form_navigator.schemas.form import Confirmation, FormResponse, FormSchema, User

log = logging.getLogger("form_navigator.client")

FETCH_FORM_FAILED = "Failed to fetch form"
CREATE_USER_FAILED = "Failed to create user"
INVALID_FORM_SCHEMA = "Received an invalid form schema"


class FormApiError(Exception):
    """Request to the form service failed."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.message = message
        self.status = status
        super().__init__(message)


class FetchError(FormApiError):
    """Loading a form schema failed."""


class RegistrationError(FormApiError):
    """Creating a user record failed."""


async def _read_json(resp: aiohttp.ClientResponse) -> Any:
    try:
        return await resp.json(content_type=None)
    except ValueError:
        return None


def _server_message(body: Any) -> str:
    if not isinstance(body, dict):
        return ""
    return str(body.get("message") or "").strip()


class FormDataClient:
    def __init__(self, base_url: str = DEFAULT_FORM_API_URL, *, session: Optional[aiohttp.ClientSession] = None) -> None:
        self._base_url = str(base_url or DEFAULT_FORM_API_URL).rstrip("/")
        self._session = session

    @classmethod
    def from_settings(cls, settings: Settings) -> "FormDataClient":
        return cls(settings.form_api_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _request(
        self,
        method: str,
        path: str,
        *,
        error_cls: Type[FormApiError],
        generic_message: str,
        **kwargs: Any,
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            if self._session is not None:
                return await self._send(self._session, method, url, error_cls, generic_message, **kwargs)
            async with aiohttp.ClientSession() as session:
                return await self._send(session, method, url, error_cls, generic_message, **kwargs)
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise error_cls(generic_message) from e

    async def _send(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        error_cls: Type[FormApiError],
        generic_message: str,
        **kwargs: Any,
    ) -> Any:
        async with session.request(method, url, **kwargs) as resp:
            body = await _read_json(resp)
            if not 200 <= resp.status < 300:
                message = _server_message(body) or generic_message
                log.warning("%s %s returned %d: %s", method, url, resp.status, message)
                raise error_cls(message, status=resp.status)
            return body

    async def fetch_form(self, roll_number: str) -> FormSchema:
        """Fetch the form schema assigned to `roll_number`."""
        body = await self._request(
            "GET",
            "/get-form",
            params={"rollNumber": roll_number},
            headers={"Content-Type": "application/json"},
            error_cls=FetchError,
            generic_message=FETCH_FORM_FAILED,
        )
        try:
            return FormResponse.model_validate(body).form
        except ValidationError as e:
            log.warning("form schema for %s did not validate: %s", roll_number, e)
            raise FetchError(INVALID_FORM_SCHEMA) from e

    async def register_user(self, user: User) -> Confirmation:
        """Create the remote user record for `user`."""
        body = await self._request(
            "POST",
            "/create-user",
            json=user.model_dump(by_alias=True, include={"roll_number", "name"}),
            error_cls=RegistrationError,
            generic_message=CREATE_USER_FAILED,
        )
        if not isinstance(body, dict):
            log.warning("create-user for %s returned a non-object body", user.roll_number)
            raise RegistrationError(CREATE_USER_FAILED)
        return Confirmation.model_validate(body)
