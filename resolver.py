# services/chat/resolver.py

from __future__ import annotations

import logging
import random as _rnd
from dataclasses import dataclass
from typing import Literal, Optional, Union

from bank import KnowledgeBase, SubjectId, get_knowledge

logger = logging.getLogger("subject-chat.resolver")

SELECT_SUBJECT_MESSAGE = "Please select a subject first (Science or Maths) before asking questions."
SELECT_SUBJECT_FOR_RANDOM_MESSAGE = (
    "Please select a subject first (Science or Maths) to get a random question."
)


@dataclass(frozen=True)
class Answer:
    text: str
    kind: Literal["prompt", "exact", "fuzzy"]
    matched: Optional[str] = None


@dataclass(frozen=True)
class NeedsFallback:
    question: str


Resolution = Union[Answer, NeedsFallback]


def resolve(
    question: str, subject: Optional[SubjectId], kb: Optional[KnowledgeBase] = None
) -> Resolution:
    """
    Resolve a question against the subject's bank.

    Exact (case-sensitive) match first, then a case-insensitive substring test in
    either direction. First match in bank insertion order wins.
    """
    if subject is None:
        return Answer(SELECT_SUBJECT_MESSAGE, kind="prompt")

    bank = (kb if kb is not None else get_knowledge())[subject]

    if question in bank:
        return Answer(bank[question], kind="exact", matched=question)

    lowered = question.lower()
    for known, answer in bank.items():
        known_lower = known.lower()
        if lowered in known_lower or known_lower in lowered:
            logger.debug("fuzzy match %r -> %r", question, known)
            return Answer(answer, kind="fuzzy", matched=known)

    return NeedsFallback(question)


def pick_random(
    subject: Optional[SubjectId],
    kb: Optional[KnowledgeBase] = None,
    rng: Optional[_rnd.Random] = None,
) -> str:
    if subject is None:
        return SELECT_SUBJECT_FOR_RANDOM_MESSAGE
    questions = list((kb if kb is not None else get_knowledge())[subject])
    r = rng or _rnd
    return questions[r.randrange(len(questions))]


def random_question_message(subject: SubjectId, question: str) -> str:
    return f"Here's a {subject.value} question for you: {question}"


def subject_greeting(subject: SubjectId, kb: Optional[KnowledgeBase] = None) -> str:
    name = subject.display_name
    questions = "\n".join((kb if kb is not None else get_knowledge())[subject])
    return (
        f"You've selected {name}. Ask me anything about {name} "
        f"or try one of these questions:\n\n{questions}"
    )
