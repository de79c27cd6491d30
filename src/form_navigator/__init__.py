"""
Dynamic multi-step form navigator.

Fetches a form schema from the remote form service, renders it section by section,
validates each section before moving on and emits the collected answers on submit.

- Schema types: `form_navigator.schemas`
- Session state machine: `form_navigator.engine`
- Host service: `form_navigator.api.main:create_app`
"""
