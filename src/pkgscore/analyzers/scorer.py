"""NetScore aggregation over the per-metric results."""

import logging
from collections.abc import Mapping

from pkgscore.models.schemas import MetricName, MetricResult

logger = logging.getLogger(__name__)


class ScoreAggregator:
    """Combines the five metric results of one repository into a NetScore.

    Scoring weights default to equal shares (20% each). Weights are
    renormalized over the metrics that actually produced a score, so a
    failed fetch lowers confidence without dragging the NetScore to zero.
    NetScore latency is the sum of every sub-metric latency.
    """

    # Score weights
    DEFAULT_WEIGHTS: dict[MetricName, float] = {name: 1 / len(MetricName) for name in MetricName}

    def __init__(
        self,
        weights: Mapping[MetricName, float] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            weights: Relative weight per metric. Metrics left out weigh 0.
                They need not sum to 1; they are renormalized per repository.
            log: Logger to report through. Defaults to the module logger.

        Raises:
            ValueError: If a weight is negative or no weight is positive.
        """
        self.weights = self._validate_weights(weights or self.DEFAULT_WEIGHTS)
        self.log = log or logger

    @staticmethod
    def _validate_weights(weights: Mapping[MetricName, float]) -> dict[MetricName, float]:
        validated: dict[MetricName, float] = {}
        for name, weight in weights.items():
            metric = MetricName(name)
            if weight < 0:
                raise ValueError(f"Weight for {metric.value} must not be negative, got {weight}")
            validated[metric] = float(weight)

        if not any(w > 0 for w in validated.values()):
            raise ValueError("At least one metric weight must be positive")
        return validated

    def aggregate(self, results: Mapping[MetricName, MetricResult]) -> MetricResult:
        """Calculate the NetScore and its latency.

        Args:
            results: Metric results for one repository.

        Returns:
            MetricResult whose score is None when no weighted metric is present.
        """
        latency_ms = round(sum(r.latency_ms for r in results.values()), 3)

        weighted_sum = 0.0
        weight_total = 0.0
        for name, result in results.items():
            weight = self.weights.get(name, 0.0)
            if result.score is None or weight == 0:
                continue
            weighted_sum += weight * result.score
            weight_total += weight

        if weight_total == 0:
            self.log.warning("No metric scores to aggregate; NetScore is unavailable")
            return MetricResult(score=None, latency_ms=latency_ms)

        score = min(max(round(weighted_sum / weight_total, 2), 0.0), 1.0)
        return MetricResult(score=score, latency_ms=latency_ms)
