from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Dict, List, Optional, Set, Tuple, TypeVar

logger = logging.getLogger("subject-chat.tasks")

T = TypeVar("T")

# (session_id, request_id); request ids are only unique within a session
TaskKey = Tuple[Optional[str], str]


class DuplicateRequestError(RuntimeError):
    pass


class FallbackTasks:
    """In-flight fallback lookups keyed by session and request id."""

    def __init__(self) -> None:
        self._tasks: Dict[TaskKey, asyncio.Task] = {}
        self._cancelled: Set[TaskKey] = set()

    def pending(self, session_id: Optional[str] = None) -> List[str]:
        return [rid for (sid, rid) in self._tasks if session_id is None or sid == session_id]

    async def run(
        self, request_id: str, coro: Awaitable[T], session_id: Optional[str] = None
    ) -> Optional[T]:
        """
        Await `coro` as a registered task. Returns None when the task was
        cancelled through this registry.
        """
        key = (session_id, request_id)
        if key in self._tasks:
            # close the never-awaited coroutine before refusing
            close = getattr(coro, "close", None)
            if close is not None:
                close()
            raise DuplicateRequestError(f"request {request_id!r} already in flight")

        task = asyncio.ensure_future(coro)
        self._tasks[key] = task
        try:
            return await task
        except asyncio.CancelledError:
            if key in self._cancelled and task.cancelled():
                logger.info("fallback request %s cancelled", request_id)
                return None
            raise
        finally:
            self._tasks.pop(key, None)
            self._cancelled.discard(key)

    def cancel(self, request_id: str, session_id: Optional[str] = None) -> bool:
        key = (session_id, request_id)
        task = self._tasks.get(key)
        if task is None or task.done():
            return False
        self._cancelled.add(key)
        return task.cancel()

    def cancel_session(self, session_id: str) -> int:
        ids = self.pending(session_id)
        return sum(1 for rid in ids if self.cancel(rid, session_id))
