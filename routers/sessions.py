# services/chat/routers/sessions.py

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from deps.chat import get_fetcher, get_store, get_tasks
from fallback import SEARCH_ERROR_MESSAGE, FallbackFetcher
from resolver import (
    Answer,
    pick_random,
    random_question_message,
    resolve,
    subject_greeting,
)
from schemas.chat import (
    CancelResponse,
    ChatReply,
    MessageRequest,
    RandomQuestionResponse,
    SelectSubjectRequest,
    SelectSubjectResponse,
    SessionOut,
)
from sessions import Session, SessionStore
from tasks import DuplicateRequestError, FallbackTasks

logger = logging.getLogger("subject-chat.sessions")

router = APIRouter(prefix="/sessions", tags=["sessions"])

CANCELLED_MESSAGE = "That search was cancelled."


def _session_or_404(store: SessionStore, session_id: str) -> Session:
    s = store.get(session_id)
    if s is None:
        raise HTTPException(status_code=404, detail="session not found")
    return s


@router.post("", response_model=SessionOut, status_code=201)
def create_session(store: SessionStore = Depends(get_store)):
    s = store.create()
    return {"session_id": s.id, "subject": s.subject}


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    s = _session_or_404(store, session_id)
    return {"session_id": s.id, "subject": s.subject}


# async so cancellation happens on the event loop that owns the tasks
@router.delete("/{session_id}", response_model=CancelResponse)
async def end_session(
    session_id: str,
    store: SessionStore = Depends(get_store),
    tasks: FallbackTasks = Depends(get_tasks),
):
    """Widget closed: forget the session and drop its pending searches."""
    s = _session_or_404(store, session_id)
    cancelled = tasks.cancel_session(s.id)
    store.remove(s.id)
    return {"ok": True, "cancelled": cancelled > 0}


@router.post("/{session_id}/subject", response_model=SelectSubjectResponse)
async def select_subject(
    session_id: str,
    req: SelectSubjectRequest,
    store: SessionStore = Depends(get_store),
    tasks: FallbackTasks = Depends(get_tasks),
):
    s = _session_or_404(store, session_id)
    previous = s.subject
    s.select(req.subject)

    # answers still in flight were asked under the old subject
    cancelled = tasks.cancel_session(s.id) if previous != req.subject else 0

    return {
        "session_id": s.id,
        "subject": s.subject,
        "reply": subject_greeting(req.subject),
        "cancelled": cancelled,
    }


@router.post("/{session_id}/messages", response_model=ChatReply)
async def post_message(
    session_id: str,
    req: MessageRequest,
    store: SessionStore = Depends(get_store),
    tasks: FallbackTasks = Depends(get_tasks),
    fetcher: Optional[FallbackFetcher] = Depends(get_fetcher),
):
    s = _session_or_404(store, session_id)
    request_id = req.request_id or uuid.uuid4().hex
    # snapshot: the session may switch subject while we wait on the network
    subject = s.subject

    result = resolve(req.message, subject)
    out: Dict[str, Any] = {"request_id": request_id, "subject": subject}

    if isinstance(result, Answer):
        out.update(reply=result.text, source=result.kind, matched=result.matched)
        return out

    if fetcher is None:
        logger.warning("no search provider available, request %s not searched", request_id)
        out.update(reply=SEARCH_ERROR_MESSAGE, source="unavailable")
        return out

    logger.info("no local answer in %s, searching online (request %s)", subject, request_id)
    try:
        reply = await tasks.run(request_id, fetcher.fetch(result.question), session_id=s.id)
    except DuplicateRequestError:
        raise HTTPException(status_code=409, detail="request_id already in flight")

    if reply is None:
        out.update(reply=CANCELLED_MESSAGE, source="cancelled")
    else:
        out.update(reply=reply, source="online")
    return out


@router.get("/{session_id}/random", response_model=RandomQuestionResponse)
def random_question(session_id: str, store: SessionStore = Depends(get_store)):
    s = _session_or_404(store, session_id)
    if s.subject is None:
        return {"reply": pick_random(None), "question": None}
    q = pick_random(s.subject)
    return {"reply": random_question_message(s.subject, q), "question": q}


@router.delete("/{session_id}/requests/{request_id}", response_model=CancelResponse)
async def cancel_request(
    session_id: str,
    request_id: str,
    store: SessionStore = Depends(get_store),
    tasks: FallbackTasks = Depends(get_tasks),
):
    s = _session_or_404(store, session_id)
    return {"ok": True, "cancelled": tasks.cancel(request_id, session_id=s.id)}
