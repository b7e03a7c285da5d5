from __future__ import annotations

import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Optional

from bank import SubjectId


@dataclass
class Session:
    """Chat state for one widget: only the selected subject, unset until chosen."""

    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    subject: Optional[SubjectId] = None
    last_seen: float = 0.0

    def select(self, subject: SubjectId) -> None:
        self.subject = subject


class SessionStore:
    """
    In-memory sessions, least recently used first. Sessions idle longer than
    `ttl` seconds are dropped, and the oldest go once `max_sessions` is reached.
    """

    def __init__(
        self,
        ttl: float = 3600.0,
        max_sessions: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()

    def _prune(self, now: float) -> None:
        while self._sessions:
            sid, s = next(iter(self._sessions.items()))
            if now - s.last_seen <= self.ttl and len(self._sessions) < self.max_sessions:
                break
            del self._sessions[sid]

    def create(self) -> Session:
        now = self._clock()
        self._prune(now)
        s = Session(last_seen=now)
        self._sessions[s.id] = s
        return s

    def get(self, session_id: str) -> Optional[Session]:
        s = self._sessions.get(session_id)
        if s is None:
            return None
        now = self._clock()
        if now - s.last_seen > self.ttl:
            del self._sessions[session_id]
            return None
        s.last_seen = now
        self._sessions.move_to_end(session_id)
        return s

    def remove(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
