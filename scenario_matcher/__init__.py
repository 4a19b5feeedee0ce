"""Scenario matcher service: four-candle pattern matching against a scenario catalog."""

__version__ = "1.0.0"
