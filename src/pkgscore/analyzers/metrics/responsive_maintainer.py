"""Maintainer responsiveness from the open/closed issue ratio."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pkgscore.analyzers.metrics.base import MetricCalculator, fetch_together
from pkgscore.models.schemas import IssueRecord, MetricName, RepoMetadata, RepoRef


def calculate_responsiveness(metadata: RepoMetadata, issues: Iterable[IssueRecord]) -> float:
    """Score the ratio of open to closed issues.

    The repository's own ``open_issues_count`` takes precedence over the
    locally counted open issues when it is non-zero. With no closed issues
    the ratio is 0, which scores as fully responsive.

    Returns:
        ``1 / (1 + open / closed)`` rounded half up to two decimals.
    """
    open_count = 0
    closed_count = 0
    for issue in issues:
        if issue.is_closed:
            closed_count += 1
        else:
            open_count += 1

    open_count = metadata.open_issues_count or open_count

    ratio = open_count / closed_count if closed_count > 0 else 0
    score = Decimal(1 / (1 + ratio)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(score)


class ResponsiveMaintainerCalculator(MetricCalculator):
    """Responsiveness from repository metadata and the full issue list."""

    name = MetricName.RESPONSIVE_MAINTAINER

    async def calculate(self, repo_ref: RepoRef) -> float:
        metadata, issues = await fetch_together(
            self.fetcher.fetch_repo_metadata(repo_ref),
            self.fetcher.fetch_issues(repo_ref),
        )
        self.log.debug(
            "%s: open_issues_count=%d, %d issues listed",
            repo_ref.url,
            metadata.open_issues_count,
            len(issues),
        )
        return calculate_responsiveness(metadata, issues)
