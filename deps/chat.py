import logging
from typing import Optional

from config import get_settings
from fallback import FallbackFetcher, SearchConfigError, build_provider
from sessions import SessionStore
from tasks import FallbackTasks

logger = logging.getLogger("subject-chat.deps")

# Process-wide, owned by the HTTP layer
_settings = get_settings()
_store = SessionStore(ttl=_settings.session_ttl_seconds, max_sessions=_settings.session_max)
_tasks = FallbackTasks()


def get_store() -> SessionStore:
    return _store


def get_tasks() -> FallbackTasks:
    return _tasks


def get_fetcher() -> Optional[FallbackFetcher]:
    """
    Build the fetcher from current settings. Provider choice is configuration;
    tests swap this dependency out for one with a mock transport.
    """
    try:
        provider = build_provider(get_settings())
    except SearchConfigError:
        logger.exception("search provider misconfigured")
        return None
    return FallbackFetcher(provider)
