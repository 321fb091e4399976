"""Ramp-up ease from documentation present at the repository root."""

from collections.abc import Iterable

from pkgscore.analyzers.metrics.base import MetricCalculator
from pkgscore.models.schemas import ContentEntry, MetricName, RepoRef

README_NAMES = ["readme.md", "readme.rst", "readme.txt", "readme.markdown", "readme"]
DOCS_DIRS = {"docs", "doc", "documentation"}
EXAMPLES_DIRS = {"examples", "example", "samples"}

# README size (bytes) that earns the full README share
README_FULL_SIZE = 5000


def calculate_ramp_up(entries: Iterable[ContentEntry]) -> float:
    """Score how easy a newcomer has it from the root directory listing.

    Weights: README (scaled by size) 40%, docs directory 20%, examples
    directory 20%, CONTRIBUTING guide 20%.
    """
    root = {entry.name.lower(): entry for entry in entries}

    readme_score = 0.0
    for name in README_NAMES:
        if name in root:
            readme_score = min(root[name].size / README_FULL_SIZE, 1.0)
            break

    has_docs = any(name in DOCS_DIRS and entry.type == "dir" for name, entry in root.items())
    has_examples = any(
        name in EXAMPLES_DIRS and entry.type == "dir" for name, entry in root.items()
    )
    has_contributing = any(name.startswith("contributing") for name in root)

    score = (
        0.4 * readme_score
        + 0.2 * has_docs
        + 0.2 * has_examples
        + 0.2 * has_contributing
    )
    return round(score, 2)


class RampUpCalculator(MetricCalculator):
    name = MetricName.RAMP_UP

    async def calculate(self, repo_ref: RepoRef) -> float:
        entries = await self.fetcher.fetch_root_contents(repo_ref)
        return calculate_ramp_up(entries)
