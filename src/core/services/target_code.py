"""Target code resolution.

The lookup runs in three stages against the orchestration API:

1. `resolve_stack`: find the stack named in the target.
2. `resolve_current_service`: fetch the stack's services, find the load
   balancer and the single service it routes to.
3. `decide_code`: turn that service's color code into the active or the next
   code.

`lookup_target_code` wires the stages together for the CLI (or any other
entry-point). Side-effects such as printing stay out of this module.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, TypeVar

import httpx

from adapters.docker_cloud import DockerCloudClient
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import (
    BlueGreenError,
    FetchError,
    LinkageError,
    NotFoundError,
    ValidationError,
)
from core.domain.models import ColorOptions, LookupRequest, Service, Stack, code_of
from core.interfaces.orchestration import OrchestrationAPI

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raw failures of an API stage: transport/HTTP status errors, undecodable JSON
# and payloads that do not match the models (pydantic errors are ValueErrors).
_RAW_FAILURES: tuple[type[Exception], ...] = (httpx.HTTPError, ValueError)


def find_last(items: Iterable[T], predicate: Callable[[T], bool], *, label: str = "item") -> T | None:
    """Return the last item matching `predicate`, or None.

    Several matches are not an error (the last one wins) but usually mean the
    platform holds duplicated names, so they are logged.
    """

    matches = [item for item in items if predicate(item)]
    if len(matches) > 1:
        logger.warning("Found %d entries for %s; using the last one", len(matches), label)
    return matches[-1] if matches else None


async def resolve_stack(api: OrchestrationAPI, stack_name: str) -> Stack:
    try:
        stacks = await api.list_stacks()
        stack = find_last(stacks, lambda s: s.name == stack_name, label=f"stack {stack_name}")
        if stack is None:
            raise NotFoundError(f"Stack {stack_name} not found")
    except BlueGreenError:
        raise
    except _RAW_FAILURES as exc:
        raise FetchError("Could not fetch stacks") from exc

    logger.debug("Stack %s has %d services", stack.name, len(stack.services))
    return stack


async def resolve_current_service(
    api: OrchestrationAPI,
    *,
    service_name: str,
    stack_name: str,
    lb_name: str,
    options: ColorOptions,
    stack: Stack,
) -> Service:
    """Return the service the load balancer `lb_name` currently routes to."""

    lb_label = f"{lb_name}.{stack_name}"
    try:
        services = await api.get_services(stack.services)

        loadbalancer = find_last(services, lambda s: s.name == lb_name, label=f"loadbalancer {lb_label}")
        if loadbalancer is None:
            raise NotFoundError(f"Loadbalancer {lb_label} not found")

        links = loadbalancer.linked_to_service
        if not links:
            raise LinkageError(f"Loadbalancer {lb_label} is not linked to any services")
        if len(links) > 1:
            raise LinkageError(f"Loadbalancer {lb_label} is linked more than one service")

        linked = links[0]
        if code_of(linked.name) not in options:
            raise ValidationError(
                f"Service {service_name}.{stack_name} linked to {lb_label} "
                f"does not contain suffix from provided options {options.quoted()}"
            )

        current = find_last(services, lambda s: s.name == linked.name, label=f"service {linked.name}")
        if current is None:
            raise NotFoundError(f"Service {service_name}.{stack_name} not found")
    except BlueGreenError:
        raise
    except _RAW_FAILURES as exc:
        raise FetchError(f"Could not fetch services for stack {stack_name}") from exc

    logger.debug("Loadbalancer %s routes to %s", lb_label, current.name)
    return current


def decide_code(current_service: Service, options: ColorOptions, active: bool) -> str:
    current_code = current_service.code
    if current_code not in options:
        raise ValidationError(
            f"Service {current_service.name} does not contain suffix from provided options {options.quoted()}"
        )
    if active:
        return current_code
    return options.other(current_code)


async def lookup_target_code(
    request: LookupRequest,
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Run the whole lookup and return the code to print."""

    settings = settings or AppSettings()
    target = request.target

    async with build_async_client(settings, request.credentials, transport=transport) as client:
        api = DockerCloudClient(client)
        stack = await resolve_stack(api, target.stack)
        current = await resolve_current_service(
            api,
            service_name=target.service,
            stack_name=target.stack,
            lb_name=request.lb,
            options=request.options,
            stack=stack,
        )

    code = decide_code(current, request.options, request.active)
    logger.debug("Current code %s, returning %s (active=%s)", current.code, code, request.active)
    return code
