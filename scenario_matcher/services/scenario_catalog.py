"""
Scenario catalog loader and read-only catalog access.
"""

from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..config.exceptions import CatalogLoadError
from ..config.logging import get_logger
from ..config.settings import settings
from ..models.scenario import CATEGORY_LABELS, Bias, Category, Scenario, ScenarioCatalogDocument

logger = get_logger(__name__)


def get_category_label(category: Union[Category, str]) -> str:
    """Display label for a scenario category."""
    return CATEGORY_LABELS[Category(category)]


class ScenarioCatalog:
    """
    Ordered, immutable collection of scenarios.

    Iteration order is the order scenarios were loaded in and never changes,
    so ranking ties resolve the same way on every call.
    """

    def __init__(self, scenarios: Iterable[Scenario], version: Optional[str] = None):
        """
        Initialize catalog.

        Args:
            scenarios: Scenarios in catalog order (ids must be unique)
            version: Catalog version identifier, if known

        Raises:
            CatalogLoadError: If scenario ids are not unique
        """
        self._scenarios: Tuple[Scenario, ...] = tuple(scenarios)
        self._by_id: Dict[str, Scenario] = {s.id: s for s in self._scenarios}
        if len(self._by_id) != len(self._scenarios):
            raise CatalogLoadError("Scenario ids must be unique")
        self.version = version

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self):
        return iter(self._scenarios)

    def all_scenarios(self) -> Tuple[Scenario, ...]:
        """All scenarios in catalog order."""
        return self._scenarios

    def scenario_by_id(self, scenario_id: str) -> Optional[Scenario]:
        """Scenario with the given id, or None."""
        return self._by_id.get(scenario_id)

    def by_category(self, category: Union[Category, str]) -> List[Scenario]:
        """Scenarios of one category, in catalog order."""
        category = Category(category)
        return [s for s in self._scenarios if s.category == category]

    def category_counts(self) -> Dict[Category, int]:
        counts = Counter(s.category for s in self._scenarios)
        return {category: counts.get(category, 0) for category in Category}

    def bias_counts(self) -> Dict[Bias, int]:
        counts = Counter(s.bias for s in self._scenarios)
        return {bias: counts.get(bias, 0) for bias in Bias}


class ScenarioCatalogLoader:
    """Scenario catalog YAML loader."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize catalog loader.

        Args:
            config_path: Path to catalog YAML file (default: SCENARIO_CATALOG_PATH)
        """
        self._config_path = Path(config_path or settings.scenario_catalog_path)

    def load(self) -> ScenarioCatalog:
        """
        Load and validate the scenario catalog.

        Validates:
        - Non-empty version
        - Unique scenario ids and labels
        - Category, bias and every feature value inside its domain

        Returns:
            ScenarioCatalog in file order

        Raises:
            CatalogLoadError: If the file is missing, unreadable or invalid
        """
        if not self._config_path.exists():
            raise CatalogLoadError(f"Scenario catalog not found: {self._config_path}")

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CatalogLoadError(f"Failed to read scenario catalog {self._config_path}: {e}") from e

        if not raw:
            raise CatalogLoadError("Scenario catalog is empty")

        document = self.parse(raw)
        logger.info(
            "Scenario catalog loaded and validated",
            path=str(self._config_path),
            version=document.version,
            scenarios_count=len(document.scenarios),
        )
        return ScenarioCatalog(document.scenarios, version=document.version)

    @staticmethod
    def parse(raw: Any) -> ScenarioCatalogDocument:
        """
        Validate a raw catalog document.

        Raises:
            CatalogLoadError: With one line per failing field
        """
        if not isinstance(raw, dict):
            raise CatalogLoadError("Scenario catalog must be a mapping with 'version' and 'scenarios'")
        try:
            return ScenarioCatalogDocument.model_validate(raw)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(loc) for loc in error["loc"])
                errors.append(f"{field}: {error['msg']}")
            raise CatalogLoadError("Scenario catalog validation failed:\n" + "\n".join(errors)) from e


def load_catalog(config_path: Optional[str] = None) -> ScenarioCatalog:
    """Load the scenario catalog from config_path or SCENARIO_CATALOG_PATH."""
    return ScenarioCatalogLoader(config_path).load()
