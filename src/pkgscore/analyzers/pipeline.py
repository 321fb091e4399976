"""Per-repository evaluation: concurrent metrics, then aggregation."""

import asyncio
import logging
from collections.abc import Iterable, Mapping

import httpx

from pkgscore.adapters.base import (
    RepositoryNotFoundError,
    UnsupportedUrlError,
    classify_url,
    parse_repo_url,
)
from pkgscore.adapters.npm import NpmAdapter, PackageNotFoundError
from pkgscore.analyzers.github import GitHubFetcher, TransportError
from pkgscore.analyzers.metrics import CALCULATORS, MetricCalculator
from pkgscore.analyzers.scorer import ScoreAggregator
from pkgscore.analyzers.timer import Timer, default_timer
from pkgscore.models.schemas import (
    EvaluationState,
    MetricName,
    MetricResult,
    Platform,
    RepoRef,
    RepositoryRecord,
    UrlKind,
)

logger = logging.getLogger(__name__)


class RepositoryEvaluator:
    """Evaluates package URLs into RepositoryRecords.

    Evaluation stages for one URL:
    1. Resolve the URL to a GitHub repository (directly or via npm)
    2. Run all metric calculators concurrently
    3. Wait for every calculator to settle
    4. Aggregate the NetScore

    Use as an async context manager to share one HTTP client between all
    evaluations of a run.
    """

    def __init__(
        self,
        github_token: str | None = None,
        weights: Mapping[MetricName, float] | None = None,
        max_concurrency: int = 8,
        http_timeout: float = 30.0,
        fetcher: GitHubFetcher | None = None,
        timer: Timer | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            github_token: GitHub personal access token.
            weights: NetScore weights; equal weighting when omitted.
            max_concurrency: Maximum number of URLs evaluated at once.
            http_timeout: Timeout in seconds for every HTTP request.
            fetcher: Pre-built fetcher, mainly for tests.
            timer: Clock for latency measurement.
            log: Logger to report through. Defaults to the module logger.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.github_token = github_token
        self.http_timeout = http_timeout
        self.max_concurrency = max_concurrency
        self.timer = timer or default_timer
        self.log = log or logger
        self.aggregator = ScoreAggregator(weights, log=self.log)
        self.fetcher = fetcher or GitHubFetcher(token=github_token, timeout=http_timeout, log=self.log)
        self._http_client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RepositoryEvaluator":
        """Set up shared HTTP client."""
        if self.fetcher.client is None:
            self._http_client = httpx.AsyncClient(timeout=self.http_timeout)
            self.fetcher.client = self._http_client
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self.fetcher.client = None
            self._http_client = None

    @property
    def calculators(self) -> list[MetricCalculator]:
        return [cls(self.fetcher, timer=self.timer, log=self.log) for cls in CALCULATORS]

    async def resolve(self, url: str) -> RepoRef:
        """Resolve a package URL to a GitHub repository.

        Raises:
            UnsupportedUrlError: If the URL is neither GitHub nor npm.
            PackageNotFoundError: If the npm package does not exist.
            RepositoryNotFoundError: If no GitHub repository can be found.
            TransportError: If the npm registry cannot be reached.
        """
        kind = classify_url(url)
        if kind == UrlKind.NPM:
            return await NpmAdapter(self.fetcher, log=self.log).resolve_repo(url)
        if kind == UrlKind.GITHUB:
            repo_ref = parse_repo_url(url)
            if repo_ref is None or repo_ref.platform != Platform.GITHUB:
                raise RepositoryNotFoundError(url, "not a repository URL")
            return repo_ref
        raise UnsupportedUrlError(url)

    async def _settle(self, calculator: MetricCalculator, repo_ref: RepoRef) -> MetricResult:
        """Run one calculator, recording any unexpected failure as an absent score."""
        start = self.timer.now()
        try:
            return await calculator.compute(repo_ref)
        except Exception:
            self.log.exception("%s failed for %s", calculator.name.value, repo_ref.url)
            return MetricResult(score=None, latency_ms=self.timer.elapsed_ms(start))

    async def evaluate(self, url: str) -> RepositoryRecord:
        """Run all metrics for one URL and aggregate them.

        Args:
            url: GitHub repository or npmjs.com package URL.

        Returns:
            Aggregated RepositoryRecord. Metrics that could not be computed
            have no score; a URL that cannot be resolved yields a record with
            every metric absent.
        """
        record = RepositoryRecord(url=url)
        self.log.info("Evaluating %s", record.url)

        try:
            repo_ref = await self.resolve(record.url)
        except (
            UnsupportedUrlError,
            PackageNotFoundError,
            RepositoryNotFoundError,
            TransportError,
        ) as e:
            self.log.error("Cannot resolve %s: %s", record.url, e)
            repo_ref = None

        record.state = EvaluationState.FETCHING
        if repo_ref is None:
            for name in MetricName:
                record.set_metric(name, MetricResult(score=None, latency_ms=0.0))
        else:
            calculators = self.calculators
            results = await asyncio.gather(
                *(self._settle(calculator, repo_ref) for calculator in calculators)
            )
            for calculator, result in zip(calculators, results):
                record.set_metric(calculator.name, result)

        record.state = EvaluationState.PARTIALLY_COMPLETE

        record.set_net_score(self.aggregator.aggregate(record.metrics))
        record.state = EvaluationState.AGGREGATED
        self.log.info(
            "NetScore for %s: %s (%.3f ms)",
            record.url,
            record.net_score.score,
            record.net_score.latency_ms,
        )
        return record

    async def evaluate_many(self, urls: Iterable[str]) -> list[RepositoryRecord]:
        """Evaluate several URLs concurrently, preserving input order."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(url: str) -> RepositoryRecord:
            async with semaphore:
                return await self.evaluate(url)

        return list(await asyncio.gather(*(bounded(url) for url in urls)))
