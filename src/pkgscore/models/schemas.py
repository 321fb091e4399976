"""Pydantic models for repository evaluation data."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Platform(str, Enum):
    """Source code hosting platforms."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"
    OTHER = "other"


class UrlKind(str, Enum):
    """Kinds of package URLs accepted as input."""

    GITHUB = "github"
    NPM = "npm"
    OTHER = "other"


class MetricName(str, Enum):
    """Metrics computed for every repository.

    The value doubles as the key used in the emitted record.
    """

    RAMP_UP = "RampUp"
    CORRECTNESS = "Correctness"
    BUS_FACTOR = "BusFactor"
    RESPONSIVE_MAINTAINER = "ResponsiveMaintainer"
    LICENSE = "License"


class EvaluationState(str, Enum):
    """Lifecycle of a single repository evaluation."""

    CREATED = "created"
    FETCHING = "fetching"
    PARTIALLY_COMPLETE = "partially_complete"
    AGGREGATED = "aggregated"


class RepoRef(BaseModel):
    """Reference to a source code repository."""

    platform: Platform
    owner: str
    repo: str
    subpath: str | None = None

    @property
    def url(self) -> str:
        """Get the full repository URL."""
        base_urls = {
            Platform.GITHUB: "https://github.com",
            Platform.GITLAB: "https://gitlab.com",
            Platform.BITBUCKET: "https://bitbucket.org",
        }
        base = base_urls.get(self.platform, "")
        return f"{base}/{self.owner}/{self.repo}"


# --- Remote data views ---
#
# Partial decodes of GitHub / npm JSON. Only the fields the metrics consume
# are declared; everything else in the payload is ignored.


class RepoMetadata(BaseModel):
    """Subset of ``GET /repos/{owner}/{repo}``."""

    model_config = ConfigDict(extra="ignore")

    open_issues_count: int = Field(default=0, ge=0)
    license_spdx: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "RepoMetadata":
        license_info = data.get("license") or {}
        spdx = license_info.get("spdx_id") if isinstance(license_info, dict) else None
        return cls.model_validate(
            {
                "open_issues_count": data.get("open_issues_count") or 0,
                "license_spdx": spdx,
            }
        )


class IssueRecord(BaseModel):
    """An element of the issues list (``state=all``)."""

    model_config = ConfigDict(extra="ignore")

    closed_at: str | None = None

    @property
    def is_closed(self) -> bool:
        return bool(self.closed_at)


class ContributorRecord(BaseModel):
    """An element of the contributors list."""

    model_config = ConfigDict(extra="ignore")

    contributions: int = Field(ge=0, strict=True)


class ContentEntry(BaseModel):
    """An entry of a repository directory listing."""

    model_config = ConfigDict(extra="ignore")

    name: str
    type: str = "file"
    size: int = 0


class WorkflowRun(BaseModel):
    """A GitHub Actions workflow run."""

    model_config = ConfigDict(extra="ignore")

    status: str | None = None
    conclusion: str | None = None


# --- Evaluation results ---


class MetricResult(BaseModel):
    """Score and latency produced by one calculator for one repository.

    A ``None`` score means the metric could not be computed. The latency of
    the attempt is recorded either way.
    """

    model_config = ConfigDict(frozen=True)

    score: float | None = Field(default=None, ge=0, le=1)
    latency_ms: float = Field(default=0.0, ge=0)

    @property
    def is_present(self) -> bool:
        return self.score is not None


class SlotAlreadyFilledError(Exception):
    """Raised when a record slot is written twice within one evaluation."""

    def __init__(self, url: str, slot: str) -> None:
        self.url = url
        self.slot = slot
        super().__init__(f"{slot} is already set for {url}")


class RepositoryRecord(BaseModel):
    """Evaluation record for one URL.

    Slots are append-only: once a metric (or the NetScore) is written it
    cannot be replaced.
    """

    model_config = ConfigDict(validate_assignment=True)

    url: str = Field(frozen=True)
    metrics: dict[MetricName, MetricResult] = Field(default_factory=dict)
    net_score: MetricResult | None = None
    state: EvaluationState = EvaluationState.CREATED

    @field_validator("url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip()

    @property
    def is_complete(self) -> bool:
        """True once every metric slot has been written."""
        return all(name in self.metrics for name in MetricName)

    def set_metric(self, name: MetricName, result: MetricResult) -> None:
        if name in self.metrics:
            raise SlotAlreadyFilledError(self.url, name.value)
        self.metrics[name] = result

    def set_net_score(self, result: MetricResult) -> None:
        if self.net_score is not None:
            raise SlotAlreadyFilledError(self.url, "NetScore")
        if not self.is_complete:
            missing = [n.value for n in MetricName if n not in self.metrics]
            raise ValueError(f"Cannot aggregate {self.url}; missing {', '.join(missing)}")
        self.net_score = result

    def to_output(self) -> dict:
        """Render the record for NDJSON output.

        Unset scores and latencies are rendered as ``None`` (JSON null).
        """
        output: dict = {"URL": self.url}
        net = self.net_score
        output["NetScore"] = net.score if net else None
        output["NetScore_Latency"] = net.latency_ms if net else None

        for name in MetricName:
            result = self.metrics.get(name)
            output[name.value] = result.score if result else None
            output[f"{name.value}_Latency"] = result.latency_ms if result else None

        return output
