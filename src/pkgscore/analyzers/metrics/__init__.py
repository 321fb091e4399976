"""Metric calculators."""

from pkgscore.analyzers.metrics.base import MetricCalculator
from pkgscore.analyzers.metrics.bus_factor import BusFactorCalculator
from pkgscore.analyzers.metrics.correctness import CorrectnessCalculator
from pkgscore.analyzers.metrics.license import LicenseCalculator
from pkgscore.analyzers.metrics.ramp_up import RampUpCalculator
from pkgscore.analyzers.metrics.responsive_maintainer import ResponsiveMaintainerCalculator

# Calculator classes in output order
CALCULATORS: list[type[MetricCalculator]] = [
    RampUpCalculator,
    CorrectnessCalculator,
    BusFactorCalculator,
    ResponsiveMaintainerCalculator,
    LicenseCalculator,
]

__all__ = [
    "CALCULATORS",
    "MetricCalculator",
    "BusFactorCalculator",
    "CorrectnessCalculator",
    "LicenseCalculator",
    "RampUpCalculator",
    "ResponsiveMaintainerCalculator",
]
