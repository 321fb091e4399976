"""Bus factor from the distribution of contributions."""

import math
from collections.abc import Sequence

from pkgscore.analyzers.metrics.base import MetricCalculator
from pkgscore.models.schemas import MetricName, RepoRef

# Share of all contributions the critical contributor set must cover
COVERAGE_THRESHOLD = 0.95


def calculate_bus_factor(
    contributions: Sequence[int],
    threshold: float = COVERAGE_THRESHOLD,
) -> float:
    """Score how many contributors are needed to cover most of the work.

    Contributors are taken from the largest down until their cumulative share
    reaches ``threshold``; with ``k`` of ``n`` contributors needed the score is
    ``1 - k / n``, rounded half up to one decimal. A single contributor, an
    empty list or zero total contributions all score 0.

    Args:
        contributions: Contribution count per contributor, in any order.
        threshold: Coverage threshold as a fraction of total contributions.

    Returns:
        Bus factor in [0, 1].
    """
    n = len(contributions)
    total = sum(contributions)
    if n == 0 or total == 0:
        return 0.0

    # sorted() is stable, so ties keep their input order
    ordered = sorted(contributions, reverse=True)

    covered = 0.0
    k = 0
    while covered < threshold and k < n:
        covered += ordered[k] / total
        k += 1

    # Ties round up: 0.25 becomes 0.3
    return math.floor((1 - k / n) * 10 + 0.5) / 10


class BusFactorCalculator(MetricCalculator):
    """Bus factor from the GitHub contributors list."""

    name = MetricName.BUS_FACTOR

    async def calculate(self, repo_ref: RepoRef) -> float:
        contributors = await self.fetcher.fetch_contributors(repo_ref)
        return calculate_bus_factor([c.contributions for c in contributors])
