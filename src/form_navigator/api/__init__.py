"""
Host service: the login step plus an HTTP surface over in-memory form sessions.

ASGI entrypoint: `form_navigator.api.main:create_app` (factory).
"""
