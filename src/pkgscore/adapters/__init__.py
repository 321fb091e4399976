"""Package URL adapters."""

from pkgscore.adapters.base import classify_url, parse_repo_url
from pkgscore.adapters.npm import NpmAdapter

__all__ = ["NpmAdapter", "classify_url", "parse_repo_url"]
