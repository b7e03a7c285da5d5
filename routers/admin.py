from __future__ import annotations

from fastapi import APIRouter

from bank import reload_knowledge

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reload")
def reload_subjects():
    n = reload_knowledge()
    return {"ok": True, "count": n}
