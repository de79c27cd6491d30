from __future__ import annotations

import logging
import uuid
from typing import Dict, Optional

from form_navigator.engine import FormEngine

log = logging.getLogger("form_navigator.sessions")


class SessionStore:
    """In-memory form sessions for one host process. Nothing is persisted."""

    def __init__(self) -> None:
        self._sessions: Dict[str, FormEngine] = {}

    def open(self, engine: FormEngine) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = engine
        log.info("opened session %s for %s", session_id, engine.user.roll_number)
        return session_id

    def get(self, session_id: str) -> Optional[FormEngine]:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        engine = self._sessions.pop(session_id, None)
        if engine is None:
            return False
        engine.close()
        log.info("closed session %s", session_id)
        return True

    def __len__(self) -> int:
        return len(self._sessions)
