from __future__ import annotations

from typing import Any, Mapping, Optional

from form_navigator.schemas.form import FormField, FormSection, ValidationErrors

REQUIRED_MESSAGE = "This field is required"


def is_empty(value: Any) -> bool:
    """Absent, blank string, unchecked box, or an empty selection."""
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple)):
        return len(value) == 0
    return False


def validate_field(field: FormField, value: Any) -> Optional[str]:
    """Return the message for the first rule `value` breaks, or None."""
    if is_empty(value):
        if field.required:
            return field.custom_message or REQUIRED_MESSAGE
        return None

    if not isinstance(value, str):
        return None
    if field.min_length is not None and len(value) < field.min_length:
        return f"Must be at least {field.min_length} characters"
    if field.max_length is not None and len(value) > field.max_length:
        return f"Cannot exceed {field.max_length} characters"
    return None


def validate_section(section: FormSection, values: Mapping[str, Any]) -> ValidationErrors:
    """Collect every violation in `section` in a single pass."""
    errors: ValidationErrors = {}
    for field in section.fields:
        message = validate_field(field, values.get(field.field_id))
        if message:
            errors[field.field_id] = message
    return errors
