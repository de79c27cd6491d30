import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer

from form_navigator.client import (
    CREATE_USER_FAILED,
    FETCH_FORM_FAILED,
    INVALID_FORM_SCHEMA,
    FetchError,
    FormDataClient,
    RegistrationError,
)
from form_navigator.schemas.form import User


def _run(routes, fn):
    """Start a local form service with `routes`, then await `fn(client)` against it."""

    async def main():
        app = web.Application()
        app.add_routes(routes)
        server = LocalServer(app)
        await server.start_server()
        try:
            return await fn(FormDataClient(str(server.make_url("/"))))
        finally:
            await server.close()

    return asyncio.run(main())


def test_fetch_form_sends_roll_number_and_parses_schema(intake_form):
    seen = {}

    async def get_form(request):
        seen["rollNumber"] = request.query.get("rollNumber")
        return web.json_response({"form": intake_form})

    schema = _run([web.get("/get-form", get_form)], lambda c: c.fetch_form("R 42"))
    assert seen["rollNumber"] == "R 42"
    assert schema.form_title == "Student Intake"
    assert schema.section_count == 3


def test_fetch_form_surfaces_server_message():
    async def get_form(request):
        return web.json_response({"message": "not found"}, status=404)

    with pytest.raises(FetchError) as exc:
        _run([web.get("/get-form", get_form)], lambda c: c.fetch_form("R404"))
    assert exc.value.message == "not found"
    assert exc.value.status == 404
    assert str(exc.value) == "not found"


def test_fetch_form_uses_generic_message_without_json_body():
    async def get_form(request):
        return web.Response(status=500, text="upstream exploded")

    with pytest.raises(FetchError) as exc:
        _run([web.get("/get-form", get_form)], lambda c: c.fetch_form("R1"))
    assert exc.value.message == FETCH_FORM_FAILED
    assert exc.value.status == 500


def test_fetch_form_rejects_malformed_schema():
    async def get_form(request):
        return web.json_response({"form": {"formTitle": "x", "sections": []}})

    with pytest.raises(FetchError) as exc:
        _run([web.get("/get-form", get_form)], lambda c: c.fetch_form("R1"))
    assert exc.value.message == INVALID_FORM_SCHEMA


def test_fetch_form_transport_failure():
    async def main():
        async def unreachable():
            # Nothing listens on the closed server's port any more.
            app = web.Application()
            server = LocalServer(app)
            await server.start_server()
            url = str(server.make_url("/"))
            await server.close()
            return url

        client = FormDataClient(await unreachable())
        await client.fetch_form("R1")

    with pytest.raises(FetchError) as exc:
        asyncio.run(main())
    assert exc.value.message == FETCH_FORM_FAILED
    assert exc.value.status is None
    assert exc.value.__cause__ is not None


def test_register_user_posts_record():
    seen = {}

    async def create_user(request):
        seen["body"] = await request.json()
        return web.json_response({"message": "User created successfully"})

    user = User(roll_number="R1", name="Ada")
    confirmation = _run([web.post("/create-user", create_user)], lambda c: c.register_user(user))
    assert seen["body"] == {"rollNumber": "R1", "name": "Ada"}
    assert confirmation.message == "User created successfully"


def test_register_user_failure_mirrors_fetch():
    async def create_user(request):
        return web.json_response({"message": "User already exists"}, status=409)

    user = User(roll_number="R1", name="Ada")
    with pytest.raises(RegistrationError) as exc:
        _run([web.post("/create-user", create_user)], lambda c: c.register_user(user))
    assert exc.value.message == "User already exists"
    assert exc.value.status == 409


def test_register_user_generic_message_for_empty_error_body():
    async def create_user(request):
        return web.json_response({}, status=400)

    user = User(roll_number="R1", name="Ada")
    with pytest.raises(RegistrationError) as exc:
        _run([web.post("/create-user", create_user)], lambda c: c.register_user(user))
    assert exc.value.message == CREATE_USER_FAILED


def test_base_url_trailing_slash_is_trimmed():
    assert FormDataClient("http://forms.local/").base_url == "http://forms.local"
