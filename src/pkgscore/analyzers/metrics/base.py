"""Base class for metric calculators."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any, ClassVar

from pkgscore.analyzers.github import GitHubFetcher, MalformedDataError, TransportError
from pkgscore.analyzers.timer import Timer, default_timer
from pkgscore.models.schemas import MetricName, MetricResult, RepoRef

logger = logging.getLogger(__name__)


async def fetch_together(*fetches: Awaitable[Any]) -> list[Any]:
    """Run independent fetches concurrently and wait for all of them.

    Every fetch settles before the first failure (in argument order) is
    raised, so no sibling is left running unobserved.
    """
    outcomes = await asyncio.gather(*fetches, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)


class MetricCalculator(ABC):
    """One independent metric.

    ``compute`` brackets the remote fetches and the scoring with the timer
    and turns transport or decode failures into an absent score, so nothing
    raised by the data sources escapes a calculator.
    """

    name: ClassVar[MetricName]

    def __init__(
        self,
        fetcher: GitHubFetcher,
        timer: Timer | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.timer = timer or default_timer
        self.log = log or logger

    @abstractmethod
    async def calculate(self, repo_ref: RepoRef) -> float:
        """Fetch the metric's inputs and return a score in [0, 1]."""
        ...

    async def compute(self, repo_ref: RepoRef) -> MetricResult:
        start = self.timer.now()
        score: float | None = None

        try:
            score = await self.calculate(repo_ref)
        except TransportError as e:
            self.log.warning("%s unavailable for %s: %s", self.name.value, repo_ref.url, e)
        except MalformedDataError as e:
            self.log.warning("%s skipped for %s: %s", self.name.value, repo_ref.url, e)

        latency_ms = self.timer.elapsed_ms(start)
        if score is not None:
            self.log.info(
                "%s for %s: %.2f (%.3f ms)", self.name.value, repo_ref.url, score, latency_ms
            )
        return MetricResult(score=score, latency_ms=latency_ms)
