"""GitHub data fetcher used by the metric calculators."""

import logging
import os
from datetime import datetime, timezone

import httpx
from pydantic import BaseModel, ValidationError

from pkgscore.models.schemas import (
    ContentEntry,
    ContributorRecord,
    IssueRecord,
    RepoMetadata,
    RepoRef,
    WorkflowRun,
)

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when remote data cannot be retrieved.

    Covers network failures, timeouts, non-2xx responses (auth, rate limit,
    missing resources) and bodies that are not JSON.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Failed to fetch {url}{status}: {message}")


class MalformedDataError(Exception):
    """Raised when fetched JSON lacks an expected field or has the wrong type."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"Malformed data from {url}: {message}")


def github_api_url(repo_ref: RepoRef, endpoint: str = "") -> str:
    """Build the REST API URL for a repository and optional endpoint.

    >>> github_api_url(RepoRef(platform="github", owner="lodash", repo="lodash"), "contributors")
    'https://api.github.com/repos/lodash/lodash/contributors'
    """
    base = f"{GitHubFetcher.BASE_URL}/repos/{repo_ref.owner}/{repo_ref.repo}"
    return f"{base}/{endpoint.lstrip('/')}" if endpoint else base


class GitHubFetcher:
    """Fetches JSON from the GitHub API (and any other JSON endpoint).

    Requires a GitHub personal access token for higher rate limits.
    Set GITHUB_TOKEN environment variable or pass token to constructor.
    """

    BASE_URL = "https://api.github.com"
    API_HOST = "api.github.com"

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        max_pages: int = 5,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token. If not provided, uses GITHUB_TOKEN env var.
            client: Optional httpx client. If not provided, a new client is created per request.
            timeout: Request timeout in seconds for clients created by the fetcher.
            max_pages: Default page limit for paginated endpoints.
            log: Logger to report through. Defaults to the module logger.
        """
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._client = client
        self._timeout = timeout
        self.max_pages = max_pages
        self.log = log or logger

        # Rate limit tracking
        self.rate_limit_remaining: int | None = None
        self.rate_limit_reset: datetime | None = None

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    @property
    def client(self) -> httpx.AsyncClient | None:
        """Shared client, or None to open one per request."""
        return self._client

    @client.setter
    def client(self, client: httpx.AsyncClient | None) -> None:
        self._client = client

    def _headers(self, url: str) -> dict[str, str]:
        """Get headers for a request; GitHub credentials only go to GitHub."""
        if httpx.URL(url).host != self.API_HOST:
            return {"Accept": "application/json"}
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self._timeout)

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")

        if reset is not None and reset.isdigit():
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)
        if remaining is not None and remaining.isdigit():
            self.rate_limit_remaining = int(remaining)
            if self.rate_limit_remaining == 0:
                reset_at = self.rate_limit_reset.isoformat() if self.rate_limit_reset else "unknown"
                self.log.warning("GitHub rate limit exhausted; resets at %s", reset_at)

    async def _get(
        self, client: httpx.AsyncClient, url: str, params: dict | None = None
    ) -> dict | list:
        try:
            response = await client.get(url, params=params, headers=self._headers(url))
        except httpx.HTTPError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e

        self._update_rate_limits(response)
        if not response.is_success:
            raise TransportError(url, response.reason_phrase, response.status_code)
        if response.status_code == 204:
            # GitHub answers list endpoints of empty repositories this way
            return []

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(url, "response body is not JSON", response.status_code) from e

    async def fetch_json(self, url: str, params: dict | None = None) -> dict | list:
        """Fetch and decode JSON from a URL.

        Raises:
            TransportError: On network failure, timeout or a non-2xx response.
        """
        client = await self._get_client()
        self.log.debug("GET %s", url)
        try:
            return await self._get(client, url, params)
        finally:
            if self._client is None:
                await client.aclose()

    async def fetch_all_pages(
        self,
        url: str,
        params: dict | None = None,
        max_pages: int | None = None,
    ) -> list:
        """Fetch all pages from a paginated endpoint."""
        client = await self._get_client()
        params = dict(params or {})
        params.setdefault("per_page", 100)
        max_pages = max_pages or self.max_pages

        results: list = []
        page = 1

        try:
            while page <= max_pages:
                params["page"] = page
                self.log.debug("GET %s page %d", url, page)
                data = await self._get(client, url, params)
                if not isinstance(data, list):
                    raise MalformedDataError(url, f"expected a list, got {type(data).__name__}")
                if not data:
                    break

                results.extend(data)

                # Check if there are more pages
                if len(data) < params["per_page"]:
                    break
                page += 1

            if page > max_pages:
                self.log.debug("Stopped %s at the %d page limit; later pages not read", url, max_pages)
            return results
        finally:
            if self._client is None:
                await client.aclose()

    def _decode_items(self, url: str, items: list, model: type[BaseModel]) -> list:
        """Validate list elements, skipping the malformed ones."""
        decoded = []
        skipped = 0
        for item in items:
            try:
                decoded.append(model.model_validate(item))
            except ValidationError:
                skipped += 1
        if skipped:
            self.log.debug("Skipped %d malformed %s entries from %s", skipped, model.__name__, url)
        return decoded

    async def fetch_repo_metadata(self, repo_ref: RepoRef) -> RepoMetadata:
        """Fetch basic repository information."""
        url = github_api_url(repo_ref)
        data = await self.fetch_json(url)
        if not isinstance(data, dict):
            raise MalformedDataError(url, "expected a JSON object")
        try:
            return RepoMetadata.from_api(data)
        except ValidationError as e:
            raise MalformedDataError(url, str(e)) from e

    async def fetch_issues(self, repo_ref: RepoRef) -> list[IssueRecord]:
        """Fetch issues in every state (pull requests included, as GitHub lists them)."""
        url = github_api_url(repo_ref, "issues")
        items = await self.fetch_all_pages(url, params={"state": "all"})
        return self._decode_items(url, items, IssueRecord)

    async def fetch_contributors(self, repo_ref: RepoRef) -> list[ContributorRecord]:
        """Fetch contributors with their contribution counts."""
        url = github_api_url(repo_ref, "contributors")
        items = await self.fetch_all_pages(url)
        return self._decode_items(url, items, ContributorRecord)

    async def fetch_root_contents(self, repo_ref: RepoRef) -> list[ContentEntry]:
        """Fetch the repository's root directory listing."""
        url = github_api_url(repo_ref, "contents")
        data = await self.fetch_json(url)
        if not isinstance(data, list):
            raise MalformedDataError(url, "expected a directory listing")
        return self._decode_items(url, data, ContentEntry)

    async def fetch_workflow_runs(self, repo_ref: RepoRef, limit: int = 50) -> list[WorkflowRun]:
        """Fetch the most recent GitHub Actions workflow runs."""
        url = github_api_url(repo_ref, "actions/runs")
        data = await self.fetch_json(url, params={"per_page": limit})
        if not isinstance(data, dict) or not isinstance(data.get("workflow_runs", []), list):
            raise MalformedDataError(url, "expected an object with workflow_runs")
        return self._decode_items(url, data.get("workflow_runs", []), WorkflowRun)
