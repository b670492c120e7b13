from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict

from xlbf.bf_interpreter import BrainfuckInterpreter
from xlbf.tape import CellType

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    session_id: str
    interpreter: BrainfuckInterpreter
    # Serialises runs against the one tape this session owns.
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionStore:
    """Thread-safe registry of engine sessions."""

    def __init__(self) -> None:
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = threading.RLock()

    def create_session(
        self,
        *,
        tape_size: int = 1024,
        cell_type: CellType = CellType.INT32,
    ) -> SessionRecord:
        interpreter = BrainfuckInterpreter(tape_size=tape_size, cell_type=cell_type)
        session_id = uuid.uuid4().hex
        record = SessionRecord(session_id=session_id, interpreter=interpreter)
        with self._lock:
            self._sessions[session_id] = record
        logger.debug("Created session %s (%d %s cells)", session_id, tape_size, interpreter.cell_type.value)
        return record

    def get(self, session_id: str) -> SessionRecord:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError as exc:
                raise KeyError(f"Unknown session id: {session_id}") from exc

    def reset(self, session_id: str) -> SessionRecord:
        record = self.get(session_id)
        with record.lock:
            record.interpreter.reset()
        return record

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug("Removed session %s", session_id)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["SessionRecord", "SessionStore"]
