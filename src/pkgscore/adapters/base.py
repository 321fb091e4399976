"""URL classification and repository URL parsing."""

import re

from pkgscore.models.schemas import Platform, RepoRef, UrlKind


class UnsupportedUrlError(Exception):
    """Raised when a URL is neither a GitHub repository nor an npm package."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Unsupported URL (expected github.com or npmjs.com): {url}")


class RepositoryNotFoundError(Exception):
    """Raised when a package has no resolvable GitHub repository."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"No GitHub repository for {url}: {reason}")


_URL_KIND_PATTERN = re.compile(r"(github|npmjs)\.com", re.IGNORECASE)


def classify_url(url: str) -> UrlKind:
    """Tell GitHub repository URLs from npm package URLs.

    Args:
        url: URL to classify.

    Returns:
        UrlKind.GITHUB, UrlKind.NPM, or UrlKind.OTHER.
    """
    match = _URL_KIND_PATTERN.search(url or "")
    if not match:
        return UrlKind.OTHER
    return UrlKind.GITHUB if match.group(1).lower() == "github" else UrlKind.NPM


def parse_repo_url(url: str) -> RepoRef | None:
    """Parse a repository URL into a RepoRef.

    Supports GitHub, GitLab, and Bitbucket URLs.

    Args:
        url: Repository URL to parse.

    Returns:
        RepoRef if the URL can be parsed, None otherwise.
    """
    if not url:
        return None
    url = url.strip()

    # GitHub patterns
    # https://github.com/owner/repo
    # https://github.com/owner/repo.git
    # https://github.com/owner/repo/tree/main/subpath
    # git://github.com/owner/repo.git
    # git@github.com:owner/repo.git
    github_patterns = [
        r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/\s#?]+?)(?:\.git)?(?:/tree/[^/]+/(.+))?/?$",
        r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/\s#?]+?)(?:\.git)?(?:[/#?].*)?$",
        r"git@github\.com:([^/]+)/([^/\s]+?)(?:\.git)?$",
        r"git://github\.com/([^/]+)/([^/\s#?]+?)(?:\.git)?$",
    ]

    for pattern in github_patterns:
        match = re.match(pattern, url, re.IGNORECASE)
        if match:
            groups = match.groups()
            return RepoRef(
                platform=Platform.GITHUB,
                owner=groups[0],
                repo=groups[1],
                subpath=groups[2] if len(groups) > 2 else None,
            )

    # GitLab patterns
    gitlab_patterns = [
        r"(?:https?://)?(?:www\.)?gitlab\.com/([^/]+)/([^/\s]+?)(?:\.git)?/?$",
        r"git@gitlab\.com:([^/]+)/([^/\s]+?)(?:\.git)?$",
    ]

    for pattern in gitlab_patterns:
        match = re.match(pattern, url, re.IGNORECASE)
        if match:
            return RepoRef(
                platform=Platform.GITLAB,
                owner=match.group(1),
                repo=match.group(2),
            )

    # Bitbucket patterns
    bitbucket_patterns = [
        r"(?:https?://)?(?:www\.)?bitbucket\.org/([^/]+)/([^/\s]+?)(?:\.git)?/?$",
        r"git@bitbucket\.org:([^/]+)/([^/\s]+?)(?:\.git)?$",
    ]

    for pattern in bitbucket_patterns:
        match = re.match(pattern, url, re.IGNORECASE)
        if match:
            return RepoRef(
                platform=Platform.BITBUCKET,
                owner=match.group(1),
                repo=match.group(2),
            )

    return None
