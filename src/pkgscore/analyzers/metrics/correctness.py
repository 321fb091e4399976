"""Correctness from test presence and recent CI results."""

from collections.abc import Iterable

from pkgscore.analyzers.metrics.base import MetricCalculator, fetch_together
from pkgscore.models.schemas import ContentEntry, MetricName, RepoRef, WorkflowRun

TEST_DIRS = {"test", "tests", "__tests__", "spec", "specs"}


def ci_pass_rate(runs: Iterable[WorkflowRun]) -> float | None:
    """Share of completed runs that succeeded, or None without completed runs."""
    completed = [r for r in runs if r.status == "completed"]
    if not completed:
        return None
    successful = sum(1 for r in completed if r.conclusion == "success")
    return successful / len(completed)


def calculate_correctness(entries: Iterable[ContentEntry], runs: Iterable[WorkflowRun]) -> float:
    """Half for a test directory, half for the recent CI pass rate.

    Repositories without completed workflow runs are scored on the test
    directory alone.
    """
    has_tests = any(
        entry.name.lower() in TEST_DIRS and entry.type == "dir" for entry in entries
    )
    pass_rate = ci_pass_rate(runs)

    score = 0.5 * has_tests
    if pass_rate is not None:
        score += 0.5 * pass_rate
    return round(score, 2)


class CorrectnessCalculator(MetricCalculator):
    name = MetricName.CORRECTNESS

    async def calculate(self, repo_ref: RepoRef) -> float:
        entries, runs = await fetch_together(
            self.fetcher.fetch_root_contents(repo_ref),
            self.fetcher.fetch_workflow_runs(repo_ref),
        )
        return calculate_correctness(entries, runs)
