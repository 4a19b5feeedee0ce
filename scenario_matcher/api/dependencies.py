"""
Request dependencies.

The catalog and match selector are built once in the application lifespan
and kept on app.state.
"""

from fastapi import Request

from ..config.exceptions import ConfigurationError
from ..services.match_selector import MatchSelector
from ..services.scenario_catalog import ScenarioCatalog


def get_catalog(request: Request) -> ScenarioCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise ConfigurationError("Scenario catalog is not loaded")
    return catalog


def get_match_selector(request: Request) -> MatchSelector:
    selector = getattr(request.app.state, "match_selector", None)
    if selector is None:
        raise ConfigurationError("Match selector is not initialized")
    return selector
