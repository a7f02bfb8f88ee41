"""Contract of the orchestration API as seen by the resolvers.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- Lets the resolvers run against the real HTTP adapter or an in-memory fake
  without coupling the Core to httpx.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import Service, Stack


@runtime_checkable
class OrchestrationAPI(Protocol):
    """Minimal read-only surface needed to resolve a target code.

    Design rules:
    - Both methods are async because they do I/O (HTTP).
    - Failures are raised raw; the resolvers decide how to wrap them.
    """

    async def list_stacks(self) -> list[Stack]:
        """Return every stack visible to the credentials."""

        ...

    async def get_services(self, paths: Sequence[str]) -> list[Service]:
        """Fetch all `paths` concurrently; one failure fails the whole call."""

        ...
