from __future__ import annotations

import asyncio
import base64

import httpx
import pytest

from adapters.docker_cloud import DockerCloudClient
from adapters.http_client import build_async_client
from conftest import fake_docker_cloud, service_path
from core.config import AppSettings
from core.domain.errors import FetchError, NotFoundError
from core.domain.models import ColorOptions, Credentials, LookupRequest, Target
from core.services.target_code import lookup_target_code

CREDS = Credentials(user="u", token="t")


def _request(active: bool = False) -> LookupRequest:
    return LookupRequest(
        target=Target(service="svc", stack="stk"),
        lb="lb1",
        options=ColorOptions(),
        credentials=CREDS,
        active=active,
    )


def test_every_request_carries_auth_and_accept_headers(blue_stack) -> None:
    stacks, services = blue_stack
    seen: list[httpx.Request] = []
    transport = fake_docker_cloud(stacks, services, requests=seen)

    asyncio.run(lookup_target_code(_request(), AppSettings(), transport=transport))

    expected_auth = "Basic " + base64.b64encode(b"u:t").decode("ascii")
    assert len(seen) == 3
    for request in seen:
        assert request.headers["Authorization"] == expected_auth
        assert request.headers["Accept"] == "application/json"
        assert request.url.host == "cloud.docker.com"
        assert request.url.scheme == "https"


def test_base_url_comes_from_settings(blue_stack) -> None:
    stacks, services = blue_stack
    seen: list[httpx.Request] = []
    transport = fake_docker_cloud(stacks, services, requests=seen)
    settings = AppSettings(api_base_url="http://localhost:8080/")

    asyncio.run(lookup_target_code(_request(), settings, transport=transport))

    assert {str(r.url) for r in seen} == {
        "http://localhost:8080/api/app/v1/stack/",
        "http://localhost:8080" + service_path("lb1"),
        "http://localhost:8080" + service_path("svc-blue"),
    }


def test_get_services_fetches_every_path(blue_stack) -> None:
    stacks, services = blue_stack
    transport = fake_docker_cloud(stacks, services)

    async def fetch() -> list[str]:
        async with build_async_client(AppSettings(), CREDS, transport=transport) as client:
            api = DockerCloudClient(client)
            return [s.name for s in await api.get_services(list(services))]

    assert sorted(asyncio.run(fetch())) == ["lb1", "svc-blue"]


def test_http_status_errors_are_raised_raw() -> None:
    transport = fake_docker_cloud([], {})

    async def fetch() -> None:
        async with build_async_client(AppSettings(), CREDS, transport=transport) as client:
            await DockerCloudClient(client).get_service("/api/app/v1/service/missing/")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(fetch())


@pytest.mark.parametrize(("active", "expected"), [(False, "green"), (True, "blue")])
def test_lookup_target_code(blue_stack, active: bool, expected: str) -> None:
    stacks, services = blue_stack
    transport = fake_docker_cloud(stacks, services)
    assert asyncio.run(lookup_target_code(_request(active), AppSettings(), transport=transport)) == expected


def test_lookup_missing_stack() -> None:
    transport = fake_docker_cloud([{"name": "other", "services": []}], {})
    with pytest.raises(NotFoundError, match="^Stack stk not found$"):
        asyncio.run(lookup_target_code(_request(), AppSettings(), transport=transport))


def test_one_failed_service_fails_the_lookup(blue_stack) -> None:
    stacks, services = blue_stack
    del services[service_path("svc-blue")]
    transport = fake_docker_cloud(stacks, services)
    with pytest.raises(FetchError, match="^Could not fetch services for stack stk$"):
        asyncio.run(lookup_target_code(_request(), AppSettings(), transport=transport))


def test_unauthorized_stack_listing_is_a_fetch_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"detail": "denied"}))
    with pytest.raises(FetchError, match="^Could not fetch stacks$"):
        asyncio.run(lookup_target_code(_request(), AppSettings(), transport=transport))


def test_malformed_stack_payload_is_a_fetch_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    with pytest.raises(FetchError, match="^Could not fetch stacks$"):
        asyncio.run(lookup_target_code(_request(), AppSettings(), transport=transport))


def test_get_services_requests_run_concurrently(blue_stack) -> None:
    _, services = blue_stack
    paths = list(services)

    async def fetch() -> list[str]:
        arrived: list[str] = []
        all_arrived = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            arrived.append(request.url.path)
            if len(arrived) == len(paths):
                all_arrived.set()
            # Sequential fetching never gets past the first request.
            await asyncio.wait_for(all_arrived.wait(), timeout=2)
            return httpx.Response(200, json=services[request.url.path])

        transport = httpx.MockTransport(handler)
        async with build_async_client(AppSettings(), CREDS, transport=transport) as client:
            return [s.name for s in await DockerCloudClient(client).get_services(paths)]

    assert asyncio.run(fetch()) == ["lb1", "svc-blue"]
