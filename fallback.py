# services/chat/fallback.py

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from config import Settings, get_settings

logger = logging.getLogger("subject-chat.fallback")

NO_ANSWER_MESSAGE = (
    "I couldn't find a specific answer to your question. Could you try rephrasing it?"
)
SEARCH_ERROR_MESSAGE = (
    "I encountered an error while searching for an answer. Please try again later."
)

SERPAPI_ENDPOINT = "https://serpapi.com/search.json"
GOOGLE_CSE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"


class SearchConfigError(RuntimeError):
    pass


class MalformedResponse(ValueError):
    pass


def _snippet_message(item: Any) -> Optional[str]:
    if not isinstance(item, dict):
        return None
    snippet = item.get("snippet")
    if not isinstance(snippet, str) or not snippet.strip():
        return None
    link = item.get("link")
    if isinstance(link, str) and link.strip():
        return f"I found this information: {snippet}\n\nSource: {link}"
    return f"I found this information: {snippet}"


def _first_snippet(items: Any) -> Optional[str]:
    if not isinstance(items, list):
        return None
    # first result that actually carries a snippet
    for item in items:
        msg = _snippet_message(item)
        if msg is not None:
            return msg
    return None


class SearchProvider(Protocol):
    name: str

    def request_params(self, question: str) -> Dict[str, str]: ...

    @property
    def endpoint(self) -> str: ...

    def extract(self, data: Dict[str, Any]) -> Optional[str]: ...


class SerpApiProvider:
    name = "serpapi"

    def __init__(self, api_key: str, endpoint: Optional[str] = None):
        self.api_key = api_key
        self._endpoint = endpoint or SERPAPI_ENDPOINT

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def request_params(self, question: str) -> Dict[str, str]:
        if not self.api_key:
            raise SearchConfigError("SEARCH_API_KEY not configured.")
        return {"q": question, "api_key": self.api_key}

    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        box = data.get("answer_box")
        if isinstance(box, dict):
            answer = box.get("answer")
            if isinstance(answer, str) and answer.strip():
                return answer
        return _first_snippet(data.get("organic_results"))


class GoogleSearchProvider:
    name = "google"

    def __init__(self, api_key: str, engine_id: str, endpoint: Optional[str] = None):
        self.api_key = api_key
        self.engine_id = engine_id
        self._endpoint = endpoint or GOOGLE_CSE_ENDPOINT

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def request_params(self, question: str) -> Dict[str, str]:
        if not self.api_key or not self.engine_id:
            raise SearchConfigError("SEARCH_API_KEY and SEARCH_ENGINE_ID must be configured.")
        return {"q": question, "key": self.api_key, "cx": self.engine_id}

    def extract(self, data: Dict[str, Any]) -> Optional[str]:
        return _first_snippet(data.get("items"))


def build_provider(settings: Optional[Settings] = None) -> SearchProvider:
    s = settings or get_settings()
    if s.search_provider == "serpapi":
        return SerpApiProvider(s.search_api_key, s.search_endpoint)
    if s.search_provider == "google":
        return GoogleSearchProvider(s.search_api_key, s.search_engine_id, s.search_endpoint)
    raise SearchConfigError(f"unknown SEARCH_PROVIDER: {s.search_provider!r}")


def provider_configured(provider: SearchProvider) -> bool:
    try:
        provider.request_params("")
    except SearchConfigError:
        return False
    return True


class FallbackFetcher:
    """
    Asks the configured search provider when the local banks have no answer.

    `fetch` always returns a renderable string; failures are logged and turned
    into SEARCH_ERROR_MESSAGE. Only task cancellation propagates.
    """

    def __init__(
        self,
        provider: SearchProvider,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider = provider
        self.transport = transport

    async def _get_json(self, question: str) -> Dict[str, Any]:
        params = self.provider.request_params(question)
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.get(self.provider.endpoint, params=params)
            response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse("search response is not JSON") from e
        if not isinstance(data, dict):
            raise MalformedResponse("search response is not a JSON object")
        return data

    async def fetch(self, question: str) -> str:
        try:
            data = await self._get_json(question)
        except Exception:  # noqa: BLE001
            logger.exception("search via %s failed for %r", self.provider.name, question)
            return SEARCH_ERROR_MESSAGE

        answer = self.provider.extract(data)
        if answer is None:
            logger.info("search via %s returned nothing usable", self.provider.name)
            return NO_ANSWER_MESSAGE
        return answer
