"""Docker Cloud API adapter.

Pure I/O: fetches JSON and turns it into domain models. Errors (transport,
HTTP status, malformed payloads) are raised untouched; the resolvers in
`core.services.target_code` wrap them with the stage that failed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from core.domain.models import Service, Stack, StackList
from core.interfaces.orchestration import OrchestrationAPI

logger = logging.getLogger(__name__)

STACKS_PATH = "/api/app/v1/stack/"


class DockerCloudClient(OrchestrationAPI):
    """Read-only client over an authenticated `httpx.AsyncClient`."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _get_json(self, path: str) -> Any:
        logger.debug("GET %s", path)
        resp = await self._client.get(path)
        resp.raise_for_status()
        return resp.json()

    async def list_stacks(self) -> list[Stack]:
        data = await self._get_json(STACKS_PATH)
        stacks = StackList.model_validate(data).objects
        logger.debug("Fetched %d stacks", len(stacks))
        return stacks

    async def get_service(self, path: str) -> Service:
        data = await self._get_json(path)
        return Service.model_validate(data)

    async def get_services(self, paths: Sequence[str]) -> list[Service]:
        return list(await asyncio.gather(*(self.get_service(p) for p in paths)))
