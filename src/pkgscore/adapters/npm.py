"""NPM registry adapter: resolves package URLs to their GitHub repositories."""

import logging
import re
from urllib.parse import quote, urlparse

from pkgscore.adapters.base import RepositoryNotFoundError, parse_repo_url
from pkgscore.analyzers.github import GitHubFetcher, TransportError
from pkgscore.models.schemas import Platform, RepoRef

logger = logging.getLogger(__name__)


class PackageNotFoundError(Exception):
    """Raised when a package cannot be found in the npm registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package '{name}' not found in npm")


def package_name_from_url(url: str) -> str | None:
    """Extract the package name from an npmjs.com package URL.

    Handles scoped packages and version suffixes:
    - https://www.npmjs.com/package/express
    - https://www.npmjs.com/package/@babel/core
    - https://www.npmjs.com/package/lodash/v/4.17.21
    """
    path = urlparse(url.strip()).path
    match = re.match(r"^/package/((?:@[^/]+/)?[^/]+)", path)
    return match.group(1) if match else None


def normalize_repository_url(repository: dict | str | None) -> str | None:
    """Extract an https URL from an npm ``repository`` field.

    Handles various formats:
    - {"type": "git", "url": "git+https://github.com/owner/repo.git"}
    - "git+ssh://git@github.com/owner/repo.git"
    - "github:owner/repo" and the bare "owner/repo" shorthand
    """
    if not repository:
        return None

    if isinstance(repository, str):
        url = repository
    elif isinstance(repository, dict):
        url = repository.get("url") or ""
    else:
        return None

    url = url.strip()
    if not url:
        return None

    url = url.replace("git+ssh://git@", "https://")
    url = url.replace("git+", "").replace("git://", "https://")
    url = url.replace("ssh://git@", "https://")
    if url.endswith(".git"):
        url = url[: -len(".git")]

    # GitHub shorthand, explicit or bare
    if url.startswith("github:"):
        url = f"https://github.com/{url[len('github:'):]}"
    elif re.fullmatch(r"[\w.-]+/[\w.-]+", url):
        url = f"https://github.com/{url}"

    return url


class NpmAdapter:
    """Adapter for the NPM package registry.

    Data sources:
    - Package metadata: https://registry.npmjs.org/{package}
    """

    REGISTRY_URL = "https://registry.npmjs.org"

    def __init__(self, fetcher: GitHubFetcher, log: logging.Logger | None = None) -> None:
        """Initialize the adapter.

        Args:
            fetcher: JSON fetcher shared with the metric calculators.
            log: Logger to report through. Defaults to the module logger.
        """
        self.fetcher = fetcher
        self.log = log or logger

    async def get_repository_url(self, name: str) -> str | None:
        """Fetch the repository URL declared by an npm package.

        Raises:
            PackageNotFoundError: If the registry has no such package.
            TransportError: On any other fetch failure.
        """
        # URL-encode scoped package names
        url = f"{self.REGISTRY_URL}/{quote(name, safe='@')}"

        try:
            data = await self.fetcher.fetch_json(url)
        except TransportError as e:
            if e.status_code == 404:
                raise PackageNotFoundError(name) from e
            raise

        if not isinstance(data, dict):
            return None

        repository = data.get("repository")
        if not repository:
            # Fall back to the latest version's manifest
            latest = (data.get("dist-tags") or {}).get("latest", "")
            version_data = (data.get("versions") or {}).get(latest) or {}
            repository = version_data.get("repository")

        return normalize_repository_url(repository)

    async def resolve_repo(self, package_url: str) -> RepoRef:
        """Resolve an npmjs.com package URL to its GitHub repository.

        Raises:
            PackageNotFoundError: If the package does not exist.
            RepositoryNotFoundError: If the package declares no GitHub repository.
            TransportError: If the registry cannot be reached.
        """
        name = package_name_from_url(package_url)
        if not name:
            raise RepositoryNotFoundError(package_url, "cannot extract a package name")

        repository_url = await self.get_repository_url(name)
        if not repository_url:
            raise RepositoryNotFoundError(package_url, "package declares no repository")

        repo_ref = parse_repo_url(repository_url)
        if repo_ref is None or repo_ref.platform != Platform.GITHUB:
            raise RepositoryNotFoundError(package_url, f"{repository_url} is not a GitHub repository")

        self.log.info("Resolved %s to %s", package_url, repo_ref.url)
        return repo_ref
