"""Shared fixtures: a fake HTTP API and a controllable clock."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from pkgscore.analyzers.github import GitHubFetcher
from pkgscore.analyzers.timer import Timer
from pkgscore.logs import ROOT_LOGGER
from pkgscore.models.schemas import Platform, RepoRef

Route = tuple[int, Any, dict] | Callable[[httpx.Request], httpx.Response]


class FakeAPI:
    """Serves canned JSON per URL (scheme, host and path; query ignored)."""

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        url: str,
        payload: Any = None,
        status: int = 200,
        headers: dict | None = None,
    ) -> None:
        self.routes[url] = (status, payload, headers or {})

    def add_handler(self, url: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[url] = handler

    def fail(self, url: str, status: int = 500) -> None:
        self.add(url, {"message": "Server Error"}, status=status)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        status, payload, headers = route
        return httpx.Response(status, json=payload, headers=headers)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requested(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).split("?")[0] == url]


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


API = "https://api.github.com/repos"

HEALTHY_REPO = {
    "metadata": {
        "open_issues_count": 1,
        "default_branch": "main",
        "license": {"key": "mit", "spdx_id": "MIT"},
    },
    "issues": [
        {"number": 3, "closed_at": None},
        {"number": 2, "closed_at": "2024-01-02T00:00:00Z"},
        {"number": 1, "closed_at": "2024-01-01T00:00:00Z"},
    ],
    "contributors": [
        {"login": "a", "contributions": 70},
        {"login": "b", "contributions": 20},
        {"login": "c", "contributions": 6},
        {"login": "d", "contributions": 2},
        {"login": "e", "contributions": 2},
    ],
    "contents": [
        {"name": "README.md", "type": "file", "size": 5000},
        {"name": "docs", "type": "dir", "size": 0},
        {"name": "examples", "type": "dir", "size": 0},
        {"name": "CONTRIBUTING.md", "type": "file", "size": 900},
        {"name": "test", "type": "dir", "size": 0},
    ],
    "runs": {
        "total_count": 4,
        "workflow_runs": [
            {"status": "completed", "conclusion": "success"},
            {"status": "completed", "conclusion": "success"},
            {"status": "completed", "conclusion": "failure"},
            {"status": "completed", "conclusion": "failure"},
        ],
    },
}


def add_repo(api: FakeAPI, owner: str, repo: str, data: dict | None = None) -> None:
    """Register every endpoint the calculators read for one repository."""
    data = {**HEALTHY_REPO, **(data or {})}
    base = f"{API}/{owner}/{repo}"
    api.add(base, data["metadata"])
    api.add(f"{base}/issues", data["issues"])
    api.add(f"{base}/contributors", data["contributors"])
    api.add(f"{base}/contents", data["contents"])
    api.add(f"{base}/actions/runs", data["runs"])


@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
async def fetcher(api: FakeAPI):
    client = api.client()
    yield GitHubFetcher(token="test-token", client=client)
    await client.aclose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer(clock: FakeClock) -> Timer:
    return Timer(wall_clock=lambda: 1_700_000_000.0, monotonic_clock=clock)


@pytest.fixture
def repo_ref() -> RepoRef:
    return RepoRef(platform=Platform.GITHUB, owner="octo", repo="widget")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging so caplog keeps seeing pkgscore records."""
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
    root.setLevel(logging.NOTSET)
