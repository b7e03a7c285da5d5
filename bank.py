# services/chat/bank.py

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import BaseModel, ValidationError, field_validator

from config import get_settings
from subjects import SUBJECT_NAMES, SUBJECTS

logger = logging.getLogger("subject-chat.bank")


class SubjectId(str, Enum):
    science = "science"
    maths = "maths"

    @property
    def display_name(self) -> str:
        return SUBJECT_NAMES[self.value]


class UnknownSubjectError(ValueError):
    pass


def parse_subject(value: str | SubjectId) -> SubjectId:
    if isinstance(value, SubjectId):
        return value
    try:
        return SubjectId(str(value).strip().lower())
    except ValueError:
        raise UnknownSubjectError(f"unknown subject: {value!r}") from None


# QABank: question -> answer, read-only, insertion ordered
QABank = Mapping[str, str]
KnowledgeBase = Mapping[SubjectId, QABank]


class QARecord(BaseModel):
    subject: SubjectId
    question: str
    answer: str

    @field_validator("subject", mode="before")
    @classmethod
    def _lower_subject(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


def _iter_jsonl(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        for idx, line in enumerate(f, 1):
            s = line.strip()
            if not s or s.startswith("#") or s.startswith("//"):
                continue
            try:
                yield json.loads(s)
            except json.JSONDecodeError:
                logger.warning("skipping malformed line %s:%d", p.name, idx)
                continue


def _iter_json(p: Path) -> Iterable[Dict[str, Any]]:
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("skipping malformed file %s", p.name)
            data = []
    if not isinstance(data, list):
        # a single record file is accepted, anything else is not a bank
        if isinstance(data, dict) and "question" in data:
            yield data
        else:
            logger.warning("skipping %s: expected a list of records", p.name)
        return
    yield from data


def _freeze(banks: Mapping[SubjectId, Mapping[str, str]]) -> KnowledgeBase:
    return MappingProxyType({s: MappingProxyType(dict(banks[s])) for s in SubjectId})


def builtin_knowledge() -> KnowledgeBase:
    return _freeze({SubjectId(k): v for k, v in SUBJECTS.items()})


def load_knowledge(directory: Optional[Path] = None) -> KnowledgeBase:
    """
    Build a KnowledgeBase from the built-in banks, replacing any subject that
    has at least one valid record under `directory` (*.json / *.jsonl).
    """
    loaded: Dict[SubjectId, Dict[str, str]] = {}

    if directory is not None and directory.exists():
        for p in sorted(directory.rglob("*")):
            if not p.is_file():
                continue
            suf = p.suffix.lower()
            if suf == ".jsonl":
                source = _iter_jsonl(p)
            elif suf == ".json":
                source = _iter_json(p)
            else:
                continue

            for raw in source:
                try:
                    rec = QARecord.model_validate(raw)
                except ValidationError:
                    logger.warning("skipping invalid record in %s", p.name)
                    continue
                loaded.setdefault(rec.subject, {})[rec.question] = rec.answer

    banks: Dict[SubjectId, Mapping[str, str]] = {
        SubjectId(k): v for k, v in SUBJECTS.items()
    }
    banks.update(loaded)
    return _freeze(banks)


class KnowledgeStore:
    _kb: Optional[KnowledgeBase] = None

    @classmethod
    def load(cls) -> KnowledgeBase:
        if cls._kb is None:
            cls.reload()
        return cls._kb

    @classmethod
    def reload(cls) -> int:
        directory = get_settings().knowledge_dir
        kb = load_knowledge(Path(directory) if directory else None)
        # swap, never mutate
        cls._kb = kb
        n = sum(len(bank) for bank in kb.values())
        logger.info("knowledge base loaded: %d questions", n)
        return n


# Public API
def get_knowledge() -> KnowledgeBase:
    return KnowledgeStore.load()


def reload_knowledge() -> int:
    return KnowledgeStore.reload()
