from __future__ import annotations

from .form import (
    CheckboxField,
    Confirmation,
    DateField,
    DropdownField,
    FieldOption,
    FieldValidation,
    FieldValue,
    FormField,
    FormResponse,
    FormSchema,
    FormSection,
    FormValues,
    RadioField,
    TextAreaField,
    TextField,
    UnsupportedField,
    User,
    ValidationErrors,
)

__all__ = [
    "CheckboxField",
    "Confirmation",
    "DateField",
    "DropdownField",
    "FieldOption",
    "FieldValidation",
    "FieldValue",
    "FormField",
    "FormResponse",
    "FormSchema",
    "FormSection",
    "FormValues",
    "RadioField",
    "TextAreaField",
    "TextField",
    "UnsupportedField",
    "User",
    "ValidationErrors",
]
