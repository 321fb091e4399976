"""Runtime settings read from the environment."""

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from pkgscore.models.schemas import MetricName

logger = logging.getLogger(__name__)

# LOG_LEVEL accepts the numeric verbosity levels as well as level names
VERBOSITY_LEVELS = {
    "0": None,
    "1": logging.INFO,
    "2": logging.DEBUG,
}


class ConfigError(Exception):
    """Raised when an environment setting has an invalid value."""

    def __init__(self, variable: str, value: str, reason: str) -> None:
        self.variable = variable
        self.value = value
        super().__init__(f"Invalid {variable}={value!r}: {reason}")


def parse_log_level(value: str | None) -> int | None:
    """Map LOG_LEVEL to a logging level; None means logging is off."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if value in VERBOSITY_LEVELS:
        return VERBOSITY_LEVELS[value]

    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ConfigError("LOG_LEVEL", value, "expected 0, 1, 2 or a level name")
    return level


def parse_weights(pairs: str | Iterable[str] | None) -> dict[MetricName, float] | None:
    """Parse ``Name=value`` weight pairs.

    Accepts a comma separated string (``"BusFactor=0.4,License=0.6"``) or an
    iterable of pairs as given by repeated CLI options. Names are matched
    case-insensitively against the metric names.
    """
    if pairs is None:
        return None
    pairs = pairs.split(",") if isinstance(pairs, str) else list(pairs)

    by_name = {name.value.lower(): name for name in MetricName}
    weights: dict[MetricName, float] = {}
    for pair in pairs:
        pair = pair.strip()
        if not pair:
            continue
        key, sep, raw = pair.partition("=")
        metric = by_name.get(key.strip().lower())
        if not sep or metric is None:
            valid = ", ".join(name.value for name in MetricName)
            raise ConfigError("PKGSCORE_WEIGHTS", pair, f"expected Name=value with Name in {valid}")
        try:
            weight = float(raw)
        except ValueError:
            raise ConfigError("PKGSCORE_WEIGHTS", pair, "weight is not a number") from None
        if weight < 0:
            raise ConfigError("PKGSCORE_WEIGHTS", pair, "weight must not be negative")
        weights[metric] = weight

    if not weights:
        return None
    if not any(weights.values()):
        raise ConfigError("PKGSCORE_WEIGHTS", ",".join(pairs), "at least one weight must be positive")
    return weights


def _parse_number(env: Mapping[str, str], variable: str, default: float, cast: type) -> float:
    raw = env.get(variable)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(variable, raw, f"expected a {cast.__name__}") from None
    if value <= 0:
        raise ConfigError(variable, raw, "must be positive")
    return value


class Settings(BaseModel):
    """Settings for one run."""

    github_token: str | None = None
    log_file: Path | None = None
    log_level: int | None = None
    max_concurrency: int = Field(default=8, ge=1)
    http_timeout: float = Field(default=30.0, gt=0)
    weights: dict[MetricName, float] | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigError: If a variable holds an invalid value.
        """
        env = os.environ if env is None else env
        log_file = env.get("LOG_FILE")
        return cls(
            github_token=env.get("GITHUB_TOKEN") or None,
            log_file=Path(log_file) if log_file else None,
            log_level=parse_log_level(env.get("LOG_LEVEL")),
            max_concurrency=int(_parse_number(env, "PKGSCORE_MAX_CONCURRENCY", 8, int)),
            http_timeout=_parse_number(env, "PKGSCORE_HTTP_TIMEOUT", 30.0, float),
            weights=parse_weights(env.get("PKGSCORE_WEIGHTS")),
        )

    def check_github_token(self) -> bool:
        """Report whether a GitHub token is configured."""
        if not self.github_token:
            logger.warning("GITHUB_TOKEN is not set; GitHub API rate limits will be low")
            return False
        return True
