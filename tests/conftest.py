from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # Keep local .env files and BLUEGREEN_* variables out of the tests.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for name in ("API_BASE_URL", "HTTP_TIMEOUT_SECONDS", "USER_AGENT", "LOG_LEVEL"):
        monkeypatch.delenv(f"BLUEGREEN_{name}", raising=False)


def service_path(name: str) -> str:
    return f"/api/app/v1/service/{name}/"


def fake_docker_cloud(
    stacks: list[dict[str, Any]],
    services: dict[str, dict[str, Any]],
    *,
    requests: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """Serve `stacks` from the stack endpoint and `services` by path."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = request.url.path
        if path == "/api/app/v1/stack/":
            return httpx.Response(200, content=json.dumps({"objects": stacks}))
        if path in services:
            return httpx.Response(200, json=services[path])
        return httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(handler)


@pytest.fixture
def docker_cloud() -> Callable[..., httpx.MockTransport]:
    return fake_docker_cloud


@pytest.fixture
def blue_stack() -> tuple[list[dict[str, Any]], dict[str, dict[str, Any]]]:
    """Stack `stk` with `lb1` routing to `svc-blue`."""

    stacks = [{"name": "stk", "services": [service_path("lb1"), service_path("svc-blue")]}]
    services = {
        service_path("lb1"): {"name": "lb1", "linked_to_service": [{"name": "svc-blue"}]},
        service_path("svc-blue"): {"name": "svc-blue", "linked_to_service": []},
    }
    return stacks, services
