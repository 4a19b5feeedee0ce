"""
Scenario catalog API endpoints.

Provides REST API endpoints for browsing the catalog:
- List scenarios, optionally filtered by category
- Category and bias statistics
- Scenario details with the decoded observation
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..config.exceptions import ScenarioNotFoundError
from ..models.feature_vector import Observation
from ..models.scenario import Bias, Category, Scenario
from ..services.feature_encoder import decode_vector
from ..services.scenario_catalog import ScenarioCatalog, get_category_label
from .dependencies import get_catalog

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


class ScenarioListResponse(BaseModel):
    """Scenario list response."""

    version: Optional[str] = None
    total: int
    items: List[Scenario]


class CategoryStats(BaseModel):
    category: Category
    label: str
    count: int


class CatalogStatsResponse(BaseModel):
    """Category and bias counts across the catalog."""

    total: int
    categories: List[CategoryStats]
    biases: Dict[Bias, int]


class ScenarioDetailResponse(BaseModel):
    """Scenario with its category label and decoded observation."""

    scenario: Scenario
    category_label: str
    observation: Observation


@router.get("", response_model=ScenarioListResponse)
async def list_scenarios(
    category: Optional[Category] = Query(default=None, description="Filter by category"),
    catalog: ScenarioCatalog = Depends(get_catalog),
) -> ScenarioListResponse:
    """List catalog scenarios in catalog order."""
    items = catalog.by_category(category) if category is not None else list(catalog.all_scenarios())
    return ScenarioListResponse(version=catalog.version, total=len(items), items=items)


@router.get("/stats", response_model=CatalogStatsResponse)
async def catalog_stats(catalog: ScenarioCatalog = Depends(get_catalog)) -> CatalogStatsResponse:
    """Category and bias counts."""
    categories = [
        CategoryStats(category=category, label=get_category_label(category), count=count)
        for category, count in catalog.category_counts().items()
    ]
    return CatalogStatsResponse(total=len(catalog), categories=categories, biases=catalog.bias_counts())


@router.get("/{scenario_id}", response_model=ScenarioDetailResponse)
async def get_scenario(scenario_id: str, catalog: ScenarioCatalog = Depends(get_catalog)) -> ScenarioDetailResponse:
    """Scenario details."""
    scenario = catalog.scenario_by_id(scenario_id)
    if scenario is None:
        raise ScenarioNotFoundError(f"Scenario not found: {scenario_id}")
    return ScenarioDetailResponse(
        scenario=scenario,
        category_label=get_category_label(scenario.category),
        observation=decode_vector(scenario.features),
    )
