"""License compatibility with LGPL-2.1."""

from pkgscore.analyzers.metrics.base import MetricCalculator
from pkgscore.models.schemas import MetricName, RepoRef

# SPDX identifiers that can be combined with LGPL-2.1 code
COMPATIBLE_LICENSES = {
    "MIT",
    "MIT-0",
    "ISC",
    "BSD-2-CLAUSE",
    "BSD-3-CLAUSE",
    "0BSD",
    "ZLIB",
    "UNLICENSE",
    "CC0-1.0",
    "WTFPL",
    "BSL-1.0",
    "MPL-2.0",
    "LGPL-2.1",
    "LGPL-2.1-ONLY",
    "LGPL-2.1-OR-LATER",
}

# GitHub found a license file but could not identify it
UNRECOGNIZED_LICENSE = "NOASSERTION"


def calculate_license_score(spdx_id: str | None) -> float:
    """1.0 for compatible licenses, 0.5 for unrecognized ones, 0.0 otherwise."""
    if not spdx_id:
        return 0.0
    spdx = spdx_id.strip().upper()
    if spdx in COMPATIBLE_LICENSES:
        return 1.0
    if spdx == UNRECOGNIZED_LICENSE:
        return 0.5
    return 0.0


class LicenseCalculator(MetricCalculator):
    name = MetricName.LICENSE

    async def calculate(self, repo_ref: RepoRef) -> float:
        metadata = await self.fetcher.fetch_repo_metadata(repo_ref)
        return calculate_license_score(metadata.license_spdx)
