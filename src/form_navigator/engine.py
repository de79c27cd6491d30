"""
Multi-step form session.

`FormEngine` owns everything mutable about one respondent's pass through a form:
the fetched schema, the value store, the current validation errors and the active
section index. Field views never mutate state themselves; they emit `FieldEdit`
events that land in `FormEngine.edit`.

States:
  loading -> ready(0) -> ready(i +/- 1) ... -> submitted
  loading -> failed_to_load   (terminal)
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from form_navigator.client import FETCH_FORM_FAILED, FetchError
from form_navigator.renderer import FieldEdit, FieldView, render_field
from form_navigator.schemas.form import FieldValue, FormField, FormSchema, FormSection, FormValues, User, ValidationErrors
from form_navigator.validation import validate_section

log = logging.getLogger("form_navigator.engine")

NEXT_BLOCKED = "Please fix the errors in the current section before proceeding."
SUBMIT_BLOCKED = "Please fix the errors in the current section before submitting."
SUBMITTED = "Your form has been submitted successfully."


class FormSource(Protocol):
    async def fetch_form(self, roll_number: str) -> FormSchema: ...


class FormState(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    SUBMITTED = "submitted"
    FAILED_TO_LOAD = "failed_to_load"


class FormStateError(RuntimeError):
    """An operation was invoked in a state that does not allow it."""


@dataclasses.dataclass(frozen=True)
class Notice:
    title: str
    description: str
    variant: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "description": self.description, "variant": self.variant}


@dataclasses.dataclass(frozen=True)
class SectionView:
    form_title: str
    index: int
    count: int
    title: str
    description: str
    fields: List[FieldView]

    @property
    def caption(self) -> str:
        return f"Section {self.index + 1} of {self.count}: {self.title}"

    @property
    def progress(self) -> float:
        return (self.index + 1) / self.count * 100

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.count - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "formTitle": self.form_title,
            "index": self.index,
            "count": self.count,
            "title": self.title,
            "caption": self.caption,
            "description": self.description,
            "progress": self.progress,
            "isFirst": self.is_first,
            "isLast": self.is_last,
            "fields": [f.to_dict() for f in self.fields],
        }


class FormEngine:
    def __init__(
        self,
        user: User,
        source: FormSource,
        *,
        notify: Optional[Callable[[Notice], None]] = None,
    ) -> None:
        self.user = user
        self._source = source
        self._notify = notify
        self._closed = False
        self._fetch_started = False

        self.state = FormState.LOADING
        self.schema: Optional[FormSchema] = None
        self.section_index = 0
        self.values: FormValues = {}
        self.errors: ValidationErrors = {}
        self.notices: List[Notice] = []
        self.load_error: Optional[str] = None
        self.submission: Optional[Dict[str, Any]] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> None:
        if self.state is not FormState.LOADING:
            raise FormStateError(f"cannot load a form in state {self.state.value}")
        if self._fetch_started:
            raise FormStateError("form load already in progress")
        self._fetch_started = True
        try:
            schema = await self._source.fetch_form(self.user.roll_number)
        except FetchError as e:
            if self._closed:
                log.debug("session for %s closed; dropping fetch error", self.user.roll_number)
                return
            self.load_error = e.message or FETCH_FORM_FAILED
            self.state = FormState.FAILED_TO_LOAD
            log.warning("form load failed for %s: %s", self.user.roll_number, self.load_error)
            self._emit(Notice("Error", self.load_error, "destructive"))
            return

        if self._closed:
            log.debug("session for %s closed; dropping fetched schema", self.user.roll_number)
            return
        self.schema = schema
        self.section_index = 0
        self.state = FormState.READY
        log.info(
            "loaded form %r for %s (%d sections)",
            schema.form_title,
            self.user.roll_number,
            schema.section_count,
        )

    def close(self) -> None:
        """End the session. A fetch still in flight is discarded when it lands."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Editing and validation
    # ------------------------------------------------------------------

    def edit(self, event: FieldEdit) -> None:
        schema = self._require_ready()
        if schema.find_field(event.field_id) is None:
            raise FormStateError(f"unknown field: {event.field_id}")
        self.values[event.field_id] = event.value
        # Cleared optimistically; the field is re-checked on the next section pass.
        self.errors.pop(event.field_id, None)

    def set_value(self, field_id: str, value: FieldValue) -> None:
        self.edit(FieldEdit(field_id=field_id, value=value))

    def validate_section(self, index: int) -> bool:
        schema = self._require_ready()
        if not 0 <= index < schema.section_count:
            raise IndexError(f"section index out of range: {index}")
        self.errors = validate_section(schema.sections[index], self.values)
        return not self.errors

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def current_section(self) -> FormSection:
        return self._require_ready().sections[self.section_index]

    @property
    def is_first_section(self) -> bool:
        return self.section_index == 0

    @property
    def is_last_section(self) -> bool:
        return self.section_index == self._require_ready().section_count - 1

    def next(self) -> bool:
        self._require_ready()
        if self.is_last_section:
            raise FormStateError("already at the last section; submit instead")
        if not self.validate_section(self.section_index):
            self._emit(Notice("Validation Error", NEXT_BLOCKED, "destructive"))
            return False
        self.section_index += 1
        return True

    def previous(self) -> None:
        self._require_ready()
        if self.is_first_section:
            raise FormStateError("already at the first section")
        self.section_index -= 1

    def submit(self) -> Optional[Dict[str, Any]]:
        self._require_ready()
        if not self.is_last_section:
            raise FormStateError("submit is only allowed from the last section")
        if not self.validate_section(self.section_index):
            self._emit(Notice("Validation Error", SUBMIT_BLOCKED, "destructive"))
            return None

        # Identity attributes win over same-named field values.
        payload: Dict[str, Any] = {**self.values, **self.user.identity()}
        self.submission = payload
        self.state = FormState.SUBMITTED
        log.info("Form Submitted Successfully: %s", payload)
        self._emit(Notice("Form Submitted", SUBMITTED))
        return payload

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_section(self) -> SectionView:
        schema = self._require_ready()
        section = schema.sections[self.section_index]
        views = [self._render(field) for field in section.fields]
        return SectionView(
            form_title=schema.form_title,
            index=self.section_index,
            count=schema.section_count,
            title=section.title,
            description=section.description,
            fields=views,
        )

    def field_view(self, field_id: str) -> FieldView:
        """Render a single field (from any section) wired back to `edit`."""
        schema = self._require_ready()
        field = schema.find_field(field_id)
        if field is None:
            raise FormStateError(f"unknown field: {field_id}")
        return self._render(field)

    # ------------------------------------------------------------------

    def _render(self, field: FormField) -> FieldView:
        return render_field(
            field,
            self.values.get(field.field_id),
            on_change=self.edit,
            error=self.errors.get(field.field_id),
        )

    def _require_ready(self) -> FormSchema:
        if self.state is not FormState.READY or self.schema is None:
            raise FormStateError(f"form is not ready (state={self.state.value})")
        return self.schema

    def _emit(self, notice: Notice) -> None:
        self.notices.append(notice)
        if self._notify is not None:
            self._notify(notice)
