# services/chat/schemas/subjects.py
from typing import List

from pydantic import BaseModel


class SubjectOut(BaseModel):
    id: str
    name: str
    questions: List[str]
