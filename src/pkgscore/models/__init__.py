"""Data models and schemas."""

from pkgscore.models.schemas import (
    EvaluationState,
    MetricName,
    MetricResult,
    RepoRef,
    RepositoryRecord,
)

__all__ = ["MetricName", "MetricResult", "RepositoryRecord", "RepoRef", "EvaluationState"]
