"""Scenarios for generating realistic fractional ownership activity."""

from frac_estate.scenarios.market import MarketScenario

__all__ = ["MarketScenario"]
