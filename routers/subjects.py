from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException

from bank import SubjectId, UnknownSubjectError, get_knowledge, parse_subject
from schemas.subjects import SubjectOut

router = APIRouter(tags=["subjects"])


@router.get("/subjects", response_model=List[SubjectOut])
def list_subjects():
    kb = get_knowledge()
    return [{"id": s.value, "name": s.display_name, "questions": list(kb[s])} for s in SubjectId]


@router.get("/subjects/{subject}/questions", response_model=List[str])
def list_subject_questions(subject: str):
    try:
        sid = parse_subject(subject)
    except UnknownSubjectError:
        raise HTTPException(status_code=404, detail="subject not found")
    return list(get_knowledge()[sid])
