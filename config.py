from __future__ import annotations

import os
from typing import List, Optional

from pydantic import BaseModel

DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


class Settings(BaseModel):
    search_provider: str = "serpapi"
    search_api_key: str = ""
    search_engine_id: str = ""
    search_endpoint: Optional[str] = None
    knowledge_dir: Optional[str] = None
    allowed_origins: List[str] = []
    log_level: str = "INFO"
    session_ttl_seconds: float = 3600.0
    session_max: int = 10_000


def get_settings() -> Settings:
    """
    Read settings from the environment on every call so tests can monkeypatch env.
    """
    origins = os.getenv("ALLOWED_ORIGINS", DEFAULT_ORIGINS)
    return Settings(
        search_provider=os.getenv("SEARCH_PROVIDER", "serpapi").strip().lower(),
        search_api_key=os.getenv("SEARCH_API_KEY", ""),
        search_engine_id=os.getenv("SEARCH_ENGINE_ID", ""),
        search_endpoint=os.getenv("SEARCH_ENDPOINT") or None,
        knowledge_dir=os.getenv("KNOWLEDGE_DIR") or None,
        allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        session_ttl_seconds=float(os.getenv("SESSION_TTL_SECONDS", "3600")),
        session_max=int(os.getenv("SESSION_MAX", "10000")),
    )
