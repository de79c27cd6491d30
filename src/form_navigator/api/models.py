from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from form_navigator.engine import FormEngine, FormState


class LoginRequest(BaseModel):
    """Login step: identifies the respondent and registers them remotely."""

    model_config = ConfigDict(populate_by_name=True)

    roll_number: str = Field(..., alias="rollNumber", min_length=1, description="Unique roll number")
    name: str = Field(..., min_length=1, description="Display name")


class FieldEditRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_id: str = Field(..., alias="fieldId", min_length=1)
    value: Union[bool, str, None] = Field(default=None, description="String for text/select kinds, bool for checkboxes")


class SessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    session_id: str = Field(..., alias="sessionId")
    state: str
    user: Dict[str, str]
    section_index: Optional[int] = Field(default=None, alias="sectionIndex")
    section: Optional[Dict[str, Any]] = None
    values: Dict[str, Any] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    notices: List[Dict[str, Any]] = Field(default_factory=list)
    load_error: Optional[str] = Field(default=None, alias="loadError")
    submission: Optional[Dict[str, Any]] = None

    @classmethod
    def from_engine(cls, session_id: str, engine: FormEngine) -> "SessionResponse":
        ready = engine.state is FormState.READY
        return cls(
            session_id=session_id,
            state=engine.state.value,
            user=engine.user.identity(),
            section_index=engine.section_index if ready else None,
            section=engine.render_section().to_dict() if ready else None,
            values=dict(engine.values),
            errors=dict(engine.errors),
            notices=[n.to_dict() for n in engine.notices],
            load_error=engine.load_error,
            submission=engine.submission,
        )
