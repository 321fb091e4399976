import logging

import pytest

from pkgscore.analyzers.scorer import ScoreAggregator
from pkgscore.models.schemas import MetricName, MetricResult


def results(**scores):
    return {
        MetricName(name): MetricResult(score=score, latency_ms=latency)
        for name, (score, latency) in scores.items()
    }


def test_default_weights_are_equal():
    assert set(ScoreAggregator.DEFAULT_WEIGHTS) == set(MetricName)
    assert sum(ScoreAggregator.DEFAULT_WEIGHTS.values()) == pytest.approx(1.0)


def test_weights_renormalize_over_present_metrics():
    net = ScoreAggregator().aggregate(
        results(
            RampUp=(0.8, 10.0),
            Correctness=(0.4, 20.0),
            BusFactor=(None, 5.0),
            ResponsiveMaintainer=(None, 5.0),
            License=(None, 0.0),
        )
    )
    assert net.score == 0.6
    assert net.latency_ms == 40.0


def test_all_metrics_present():
    net = ScoreAggregator().aggregate(
        results(
            RampUp=(1.0, 1.0),
            Correctness=(0.5, 1.0),
            BusFactor=(0.5, 1.0),
            ResponsiveMaintainer=(0.0, 1.0),
            License=(1.0, 1.0),
        )
    )
    assert net.score == 0.6
    assert net.latency_ms == 5.0


def test_no_present_metric_gives_absent_net_score(caplog):
    with caplog.at_level(logging.WARNING):
        net = ScoreAggregator().aggregate(
            results(RampUp=(None, 2.5), License=(None, 0.5))
        )
    assert net.score is None
    assert net.latency_ms == 3.0
    assert "NetScore is unavailable" in caplog.text


def test_empty_results():
    net = ScoreAggregator().aggregate({})
    assert net.score is None
    assert net.latency_ms == 0.0


def test_custom_weights():
    aggregator = ScoreAggregator({MetricName.LICENSE: 3, "BusFactor": 1})
    net = aggregator.aggregate(
        results(RampUp=(0.0, 1.0), BusFactor=(0.2, 1.0), License=(1.0, 1.0))
    )
    # RampUp weighs nothing; (3 * 1.0 + 1 * 0.2) / 4
    assert net.score == 0.8
    assert net.latency_ms == 3.0


def test_zero_weighted_metric_alone_gives_absent_net_score():
    aggregator = ScoreAggregator({MetricName.LICENSE: 1.0, MetricName.RAMP_UP: 0.0})
    net = aggregator.aggregate(results(RampUp=(0.9, 1.0), License=(None, 1.0)))
    assert net.score is None


@pytest.mark.parametrize(
    "weights",
    [
        {MetricName.LICENSE: -1.0},
        {MetricName.LICENSE: 0.0, MetricName.RAMP_UP: 0.0},
        {"Popularity": 1.0},
    ],
)
def test_invalid_weights(weights):
    with pytest.raises(ValueError):
        ScoreAggregator(weights)
