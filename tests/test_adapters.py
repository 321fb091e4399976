import pytest

from pkgscore.adapters.base import RepositoryNotFoundError, classify_url, parse_repo_url
from pkgscore.adapters.npm import (
    NpmAdapter,
    PackageNotFoundError,
    normalize_repository_url,
    package_name_from_url,
)
from pkgscore.analyzers.github import TransportError
from pkgscore.models.schemas import Platform, UrlKind

REGISTRY = "https://registry.npmjs.org"


@pytest.mark.parametrize(
    "url, kind",
    [
        ("https://github.com/cloudinary/cloudinary_npm", UrlKind.GITHUB),
        ("https://www.npmjs.com/package/express", UrlKind.NPM),
        ("https://GitHub.com/lodash/lodash", UrlKind.GITHUB),
        ("https://gitlab.com/group/project", UrlKind.OTHER),
        ("", UrlKind.OTHER),
    ],
)
def test_classify_url(url, kind):
    assert classify_url(url) == kind


@pytest.mark.parametrize(
    "url, owner, repo",
    [
        ("https://github.com/lodash/lodash", "lodash", "lodash"),
        ("https://github.com/lodash/lodash.git", "lodash", "lodash"),
        ("https://github.com/lodash/lodash/", "lodash", "lodash"),
        ("github.com/socketio/socket.io", "socketio", "socket.io"),
        ("git@github.com:expressjs/express.git", "expressjs", "express"),
        ("git://github.com/expressjs/express.git", "expressjs", "express"),
        ("https://github.com/nodejs/node/issues/123", "nodejs", "node"),
        ("https://github.com/nodejs/node#readme", "nodejs", "node"),
    ],
)
def test_parse_github_urls(url, owner, repo):
    repo_ref = parse_repo_url(url)
    assert repo_ref.platform == Platform.GITHUB
    assert (repo_ref.owner, repo_ref.repo) == (owner, repo)


def test_parse_github_subpath():
    repo_ref = parse_repo_url("https://github.com/babel/babel/tree/main/packages/babel-core")
    assert (repo_ref.owner, repo_ref.repo) == ("babel", "babel")
    assert repo_ref.subpath == "packages/babel-core"


def test_parse_other_hosts():
    assert parse_repo_url("https://gitlab.com/group/project").platform == Platform.GITLAB
    assert parse_repo_url("git@bitbucket.org:team/repo.git").platform == Platform.BITBUCKET
    assert parse_repo_url("https://example.com/a/b") is None
    assert parse_repo_url("https://github.com/lodash") is None
    assert parse_repo_url("") is None


@pytest.mark.parametrize(
    "url, name",
    [
        ("https://www.npmjs.com/package/express", "express"),
        ("https://www.npmjs.com/package/@babel/core", "@babel/core"),
        ("https://www.npmjs.com/package/lodash/v/4.17.21", "lodash"),
        ("https://www.npmjs.com/~someone", None),
    ],
)
def test_package_name_from_url(url, name):
    assert package_name_from_url(url) == name


@pytest.mark.parametrize(
    "repository, expected",
    [
        ({"type": "git", "url": "git+https://github.com/expressjs/express.git"},
         "https://github.com/expressjs/express"),
        ("git+ssh://git@github.com/owner/repo.git", "https://github.com/owner/repo"),
        ("git://github.com/owner/repo.git", "https://github.com/owner/repo"),
        ("ssh://git@github.com/owner/repo", "https://github.com/owner/repo"),
        ("github:owner/repo", "https://github.com/owner/repo"),
        ("owner/repo", "https://github.com/owner/repo"),
        ({"type": "git"}, None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_repository_url(repository, expected):
    assert normalize_repository_url(repository) == expected


async def test_npm_resolves_repository(api, fetcher):
    api.add(
        f"{REGISTRY}/express",
        {"repository": {"type": "git", "url": "git+https://github.com/expressjs/express.git"}},
    )
    repo_ref = await NpmAdapter(fetcher).resolve_repo("https://www.npmjs.com/package/express")
    assert (repo_ref.owner, repo_ref.repo) == ("expressjs", "express")


async def test_npm_falls_back_to_latest_version(api, fetcher):
    api.add(
        f"{REGISTRY}/@babel/core",
        {
            "dist-tags": {"latest": "7.0.0"},
            "versions": {"7.0.0": {"repository": "github:babel/babel"}},
        },
    )
    repo_ref = await NpmAdapter(fetcher).resolve_repo("https://www.npmjs.com/package/@babel/core")
    assert repo_ref.url == "https://github.com/babel/babel"


async def test_npm_missing_package(fetcher):
    with pytest.raises(PackageNotFoundError):
        await NpmAdapter(fetcher).resolve_repo("https://www.npmjs.com/package/no-such-pkg")


async def test_npm_registry_failure_propagates(api, fetcher):
    api.fail(f"{REGISTRY}/express", status=503)
    with pytest.raises(TransportError):
        await NpmAdapter(fetcher).resolve_repo("https://www.npmjs.com/package/express")


async def test_npm_package_without_repository(api, fetcher):
    api.add(f"{REGISTRY}/left-pad", {"name": "left-pad"})
    with pytest.raises(RepositoryNotFoundError):
        await NpmAdapter(fetcher).resolve_repo("https://www.npmjs.com/package/left-pad")


async def test_npm_package_hosted_elsewhere(api, fetcher):
    api.add(f"{REGISTRY}/thing", {"repository": "https://gitlab.com/group/thing"})
    with pytest.raises(RepositoryNotFoundError):
        await NpmAdapter(fetcher).resolve_repo("https://www.npmjs.com/package/thing")
