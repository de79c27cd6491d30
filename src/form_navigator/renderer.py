"""
Field renderer: one field definition + its current value -> a `FieldView`.

Rendering is a pure mapping. The only way a view talks back is `FieldView.change`,
which hands a typed `FieldEdit` to the `on_change` callback supplied by the owner
of the form state.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence, Tuple

from form_navigator.schemas.form import (
    CheckboxField,
    DateField,
    DropdownField,
    FieldOption,
    FieldValue,
    FormField,
    RadioField,
    TextAreaField,
    TextField,
    UnsupportedField,
)

Widget = Literal["input", "textarea", "select", "radio_group", "checkbox", "notice"]

DROPDOWN_PLACEHOLDER = "Select an option"


@dataclasses.dataclass(frozen=True)
class FieldEdit:
    field_id: str
    value: FieldValue


OnChange = Callable[[FieldEdit], None]


@dataclasses.dataclass(frozen=True)
class Choice:
    value: str
    label: str
    control_id: Optional[str] = None
    data_test_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "label": self.label,
            "controlId": self.control_id,
            "dataTestId": self.data_test_id,
        }


@dataclasses.dataclass(frozen=True)
class FieldView:
    field_id: str
    label: str
    required: bool
    widget: Widget
    value: Optional[FieldValue] = None
    input_type: Optional[str] = None
    placeholder: str = ""
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    choices: Tuple[Choice, ...] = ()
    error: Optional[str] = None
    notice: Optional[str] = None
    data_test_id: Optional[str] = None
    on_change: Optional[OnChange] = dataclasses.field(default=None, repr=False, compare=False)

    @property
    def interactive(self) -> bool:
        return self.widget != "notice"

    def change(self, raw: Any) -> Optional[FieldEdit]:
        """Report a user edit. Inert for unsupported fields."""
        if not self.interactive or self.on_change is None:
            return None
        if self.widget == "checkbox":
            value: FieldValue = bool(raw)
        else:
            value = "" if raw is None else str(raw)
        edit = FieldEdit(field_id=self.field_id, value=value)
        self.on_change(edit)
        return edit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fieldId": self.field_id,
            "label": self.label,
            "required": self.required,
            "widget": self.widget,
            "value": self.value,
            "inputType": self.input_type,
            "placeholder": self.placeholder,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "choices": [c.to_dict() for c in self.choices],
            "error": self.error,
            "notice": self.notice,
            "dataTestId": self.data_test_id,
        }


def _choices(field_id: str, options: Sequence[FieldOption], *, with_control_ids: bool) -> Tuple[Choice, ...]:
    out: List[Choice] = []
    for opt in options:
        out.append(
            Choice(
                value=opt.value,
                label=opt.label or opt.value,
                control_id=f"{field_id}-{opt.value}" if with_control_ids else None,
                data_test_id=opt.data_test_id,
            )
        )
    return tuple(out)


def _text_value(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value)


def render_field(
    field: FormField,
    value: Any,
    *,
    on_change: Optional[OnChange] = None,
    error: Optional[str] = None,
) -> FieldView:
    common: Dict[str, Any] = {
        "field_id": field.field_id,
        "label": field.label,
        "required": field.required,
        "error": error or None,
        "data_test_id": field.data_test_id,
        "on_change": on_change,
    }

    if isinstance(field, TextField):
        return FieldView(
            widget="input",
            input_type=field.type,
            value=_text_value(value),
            placeholder=field.placeholder or "",
            min_length=field.min_length,
            max_length=field.max_length,
            **common,
        )
    if isinstance(field, TextAreaField):
        return FieldView(
            widget="textarea",
            value=_text_value(value),
            placeholder=field.placeholder or "",
            min_length=field.min_length,
            max_length=field.max_length,
            **common,
        )
    if isinstance(field, DateField):
        return FieldView(widget="input", input_type="date", value=_text_value(value), **common)
    if isinstance(field, DropdownField):
        return FieldView(
            widget="select",
            value=_text_value(value),
            placeholder=field.placeholder or DROPDOWN_PLACEHOLDER,
            choices=_choices(field.field_id, field.options, with_control_ids=False),
            **common,
        )
    if isinstance(field, RadioField):
        return FieldView(
            widget="radio_group",
            value=_text_value(value),
            choices=_choices(field.field_id, field.options, with_control_ids=True),
            **common,
        )
    if isinstance(field, CheckboxField):
        # The placeholder doubles as the caption next to the box.
        return FieldView(widget="checkbox", value=bool(value), placeholder=field.placeholder or "", **common)
    if isinstance(field, UnsupportedField):
        common["on_change"] = None
        return FieldView(widget="notice", notice=f"Unsupported field type: {field.type}", **common)
    raise TypeError(f"unhandled field kind: {type(field).__name__}")
