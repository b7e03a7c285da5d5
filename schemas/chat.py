# services/chat/schemas/chat.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from bank import SubjectId

# ---------- Session ----------


class SessionOut(BaseModel):
    session_id: str
    subject: Optional[SubjectId] = None


class SelectSubjectRequest(BaseModel):
    subject: SubjectId


class SelectSubjectResponse(BaseModel):
    session_id: str
    subject: SubjectId
    reply: str
    # in-flight fallbacks dropped because the subject changed
    cancelled: int = 0


# ---------- Messages ----------


class MessageRequest(BaseModel):
    message: str
    request_id: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("message")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message must not be empty")
        return v


class ChatReply(BaseModel):
    request_id: str
    subject: Optional[SubjectId] = None
    reply: str
    # unavailable: no search provider could be built, nothing was sent
    source: Literal["prompt", "exact", "fuzzy", "online", "cancelled", "unavailable"]
    matched: Optional[str] = None


# ---------- Random / cancel ----------


class RandomQuestionResponse(BaseModel):
    reply: str
    question: Optional[str] = None


class CancelResponse(BaseModel):
    ok: bool
    cancelled: bool
