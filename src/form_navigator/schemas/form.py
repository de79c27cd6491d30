from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator, model_validator

# Field values are strings for text/select kinds and booleans for checkboxes.
FieldValue = Union[str, bool]
FormValues = Dict[str, FieldValue]
ValidationErrors = Dict[str, str]

# Wire `type` tag -> union member tag. Anything missing here renders as unsupported.
_FIELD_KINDS: Dict[str, str] = {
    "text": "text",
    "tel": "text",
    "email": "text",
    "textarea": "textarea",
    "date": "date",
    "dropdown": "dropdown",
    "radio": "radio",
    "checkbox": "checkbox",
}


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)


class User(_WireModel):
    """Logged-in respondent. Created at login and never mutated afterwards."""

    roll_number: str = Field(..., alias="rollNumber", min_length=1)
    name: str = Field(..., min_length=1)

    def identity(self) -> Dict[str, str]:
        return {"rollNumber": self.roll_number, "name": self.name}


class Confirmation(_WireModel):
    message: str = ""


class FieldOption(_WireModel):
    value: str
    label: str = ""
    data_test_id: Optional[str] = Field(default=None, alias="dataTestId")


class FieldValidation(_WireModel):
    message: Optional[str] = None


class _FieldBase(_WireModel):
    field_id: str = Field(..., alias="fieldId", min_length=1)
    label: str = ""
    required: bool = False
    placeholder: Optional[str] = None
    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=0)
    validation: Optional[FieldValidation] = None
    data_test_id: Optional[str] = Field(default=None, alias="dataTestId")

    @property
    def custom_message(self) -> Optional[str]:
        if self.validation is None:
            return None
        return self.validation.message or None


class TextField(_FieldBase):
    type: Literal["text", "tel", "email"]


class TextAreaField(_FieldBase):
    type: Literal["textarea"]


class DateField(_FieldBase):
    type: Literal["date"]


class DropdownField(_FieldBase):
    type: Literal["dropdown"]
    options: List[FieldOption] = Field(default_factory=list)


class RadioField(_FieldBase):
    type: Literal["radio"]
    options: List[FieldOption] = Field(default_factory=list)


class CheckboxField(_FieldBase):
    type: Literal["checkbox"]


class UnsupportedField(_FieldBase):
    """A field whose `type` tag this client does not know how to render."""

    type: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _raw_tag(cls, v: Any) -> str:
        return "" if v is None else str(v)


def _field_kind(raw: Any) -> str:
    if isinstance(raw, dict):
        tag = raw.get("type")
    else:
        tag = getattr(raw, "type", None)
    # Exact match only; any other tag, including non-strings, is unsupported.
    if not isinstance(tag, str):
        return "unsupported"
    return _FIELD_KINDS.get(tag, "unsupported")


FormField = Annotated[
    Union[
        Annotated[TextField, Tag("text")],
        Annotated[TextAreaField, Tag("textarea")],
        Annotated[DateField, Tag("date")],
        Annotated[DropdownField, Tag("dropdown")],
        Annotated[RadioField, Tag("radio")],
        Annotated[CheckboxField, Tag("checkbox")],
        Annotated[UnsupportedField, Tag("unsupported")],
    ],
    Discriminator(_field_kind),
]


class FormSection(_WireModel):
    title: str = ""
    description: str = ""
    fields: List[FormField] = Field(default_factory=list)


class FormSchema(_WireModel):
    form_title: str = Field(default="", alias="formTitle")
    sections: List[FormSection]

    @model_validator(mode="after")
    def _check_structure(self) -> "FormSchema":
        if not self.sections:
            raise ValueError("form must contain at least one section")
        seen: set[str] = set()
        for section in self.sections:
            for field in section.fields:
                if field.field_id in seen:
                    raise ValueError(f"duplicate fieldId: {field.field_id}")
                seen.add(field.field_id)
        return self

    @property
    def section_count(self) -> int:
        return len(self.sections)

    def find_field(self, field_id: str) -> Optional[FormField]:
        for section in self.sections:
            for field in section.fields:
                if field.field_id == field_id:
                    return field
        return None


class FormResponse(_WireModel):
    """Body of `GET /get-form`: the schema is nested under a `form` key."""

    form: FormSchema
