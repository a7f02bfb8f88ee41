"""httpx wrapper.

Why a wrapper:
- Standardizes base URL, timeouts and headers for every API call.
- Makes testing easy: a `transport` can be injected (e.g. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings
from core.domain.models import Credentials


def build_async_client(
    settings: AppSettings | None = None,
    credentials: Credentials | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` bound to the orchestration API.

    Why a builder:
    - The auth headers travel with the client value instead of a process-wide
      request hook, so every call site gets them explicitly.
    - Centralizes timeouts/headers so all requests behave the same.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if credentials is not None:
        headers["Authorization"] = credentials.authorization_header()
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
