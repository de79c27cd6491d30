from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any, Dict

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists():
    sys.path.insert(0, str(_SRC))


_INTAKE_FORM: Dict[str, Any] = {
    "formTitle": "Student Intake",
    "sections": [
        {
            "title": "Basics",
            "description": "Tell us about yourself",
            "fields": [
                {
                    "fieldId": "fullName",
                    "type": "text",
                    "label": "Full name",
                    "required": True,
                    "minLength": 2,
                    "maxLength": 10,
                    "placeholder": "Jane Doe",
                    "dataTestId": "full-name",
                },
                {
                    "fieldId": "email",
                    "type": "email",
                    "label": "Email",
                    "required": True,
                    "validation": {"message": "Email is needed"},
                },
                {"fieldId": "nickname", "type": "text", "label": "Nickname", "minLength": 3},
            ],
        },
        {
            "title": "Details",
            "description": "A little more",
            "fields": [
                {"fieldId": "bio", "type": "textarea", "label": "Bio", "maxLength": 20},
                {"fieldId": "dob", "type": "date", "label": "Birthday"},
                {
                    "fieldId": "course",
                    "type": "dropdown",
                    "label": "Course",
                    "required": True,
                    "options": [{"value": "cs", "label": "Computer Science"}, {"value": "ee", "label": "Electrical"}],
                },
            ],
        },
        {
            "title": "Consent",
            "description": "",
            "fields": [
                {
                    "fieldId": "year",
                    "type": "radio",
                    "label": "Year",
                    "options": [{"value": "1", "label": "First"}, {"value": "2", "label": "Second"}],
                },
                {"fieldId": "agree", "type": "checkbox", "label": "Terms", "required": True, "placeholder": "I agree"},
                {"fieldId": "signature", "type": "signature", "label": "Sign here"},
            ],
        },
    ],
}


@pytest.fixture
def intake_form() -> Dict[str, Any]:
    """Three-section form covering every field kind plus one unknown kind."""
    return copy.deepcopy(_INTAKE_FORM)
