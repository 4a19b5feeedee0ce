"""
Scenario catalog models.

A Scenario is one named trading setup with its precomputed feature vector.
ScenarioCatalogDocument is the validated form of the catalog YAML file.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .feature_vector import FeatureVector


class Category(str, Enum):
    """Scenario family."""

    VETTED = "vetted"
    INSIDE_PDR = "inside_pdr"
    WHIPSAW = "whipsaw"
    PDH_BREAK = "pdh_break"
    PDL_BREAK = "pdl_break"


class Bias(str, Enum):
    """Directional bias of a scenario."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    HEAVILY_BULLISH = "Heavily Bullish"
    HEAVILY_BEARISH = "Heavily Bearish"
    MIXED = "Mixed"


CATEGORY_LABELS = {
    Category.VETTED: "Vetted",
    Category.INSIDE_PDR: "Inside PDR",
    Category.WHIPSAW: "Whipsaw",
    Category.PDH_BREAK: "PDH Break",
    Category.PDL_BREAK: "PDL Break",
}


class CandleConditions(BaseModel):
    """Human-readable description of each candle in the scenario."""

    c1: str
    c2: str
    c3: str
    c4: str

    model_config = ConfigDict(frozen=True)


class Scenario(BaseModel):
    """Immutable catalog entry."""

    id: str = Field(min_length=1, description="Unique scenario identifier")
    label: str = Field(min_length=1, description="Human-readable id, e.g. 'V-01'")
    category: Category
    conditions: CandleConditions
    entry: str = Field(description="Entry description")
    bias: Bias
    target: str = Field(description="Target description")
    notes: Optional[str] = None
    features: FeatureVector

    model_config = ConfigDict(frozen=True)


class ScenarioCatalogDocument(BaseModel):
    """Scenario catalog file contents."""

    version: str = Field(description="Catalog version identifier")
    scenarios: List[Scenario] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version is a non-empty string."""
        if not v or not v.strip():
            raise ValueError("version must be a non-empty string")
        return v

    @field_validator("scenarios")
    @classmethod
    def validate_unique_scenarios(cls, v: List[Scenario]) -> List[Scenario]:
        """Reject duplicate scenario ids and labels."""
        ids = [s.id for s in v]
        duplicate_ids = sorted({i for i in ids if ids.count(i) > 1})
        if duplicate_ids:
            raise ValueError(f"Duplicate scenario ids: {duplicate_ids}")

        labels = [s.label for s in v]
        duplicate_labels = sorted({label for label in labels if labels.count(label) > 1})
        if duplicate_labels:
            raise ValueError(f"Duplicate scenario labels: {duplicate_labels}")
        return v
