"""Scenario definitions and execution"""

from kraken_probe.scenarios.loader import load_feature, load_features
from kraken_probe.scenarios.runner import RunSummary, ScenarioResult, ScenarioRunner
from kraken_probe.scenarios.schemas import Access, Feature, Scenario

__all__ = [
    "load_feature",
    "load_features",
    "RunSummary",
    "ScenarioResult",
    "ScenarioRunner",
    "Access",
    "Feature",
    "Scenario",
]
