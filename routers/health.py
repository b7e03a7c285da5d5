# services/chat/routers/health.py
from fastapi import APIRouter

from bank import SubjectId, get_knowledge
from config import get_settings
from fallback import SearchConfigError, build_provider, provider_configured

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/knowledge")
def health_knowledge():
    kb = get_knowledge()
    counts = {s.value: len(kb[s]) for s in SubjectId}
    return {"ok": all(counts.values()), "counts": counts}


@router.get("/search")
def health_search():
    settings = get_settings()
    try:
        provider = build_provider(settings)
    except SearchConfigError as e:
        return {"ok": False, "provider": settings.search_provider, "error": str(e)}
    configured = provider_configured(provider)
    return {"ok": configured, "provider": provider.name, "configured": configured}
