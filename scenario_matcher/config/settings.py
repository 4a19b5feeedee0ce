"""
Configuration management using pydantic-settings.

Loads configuration from environment variables with validation and type conversion.
"""

from pathlib import Path
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Catalog bundled with the package, used when SCENARIO_CATALOG_PATH is not set
DEFAULT_CATALOG_PATH = str(Path(__file__).resolve().parent.parent / "data" / "scenarios.yaml")

WEIGHT_STORE_BACKENDS = {"memory", "postgres", "http"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service Configuration
    scenario_matcher_port: int = Field(default=4800, alias="SCENARIO_MATCHER_PORT")
    scenario_matcher_api_key: str = Field(..., alias="SCENARIO_MATCHER_API_KEY")
    scenario_matcher_log_level: str = Field(default="INFO", alias="SCENARIO_MATCHER_LOG_LEVEL")
    scenario_matcher_service_name: str = Field(default="scenario-matcher", alias="SCENARIO_MATCHER_SERVICE_NAME")

    # Scenario Catalog Configuration
    scenario_catalog_path: str = Field(
        default=DEFAULT_CATALOG_PATH,
        alias="SCENARIO_CATALOG_PATH",
        description="Path to the scenario catalog YAML file. Defaults to the catalog bundled with the package.",
    )

    # Weight Store Configuration
    weight_store_backend: str = Field(
        default="memory",
        alias="WEIGHT_STORE_BACKEND",
        description="Confidence weight backend: 'memory', 'postgres' or 'http'. Default: 'memory'",
    )
    weight_store_default_weight: float = Field(
        default=1.0,
        alias="WEIGHT_STORE_DEFAULT_WEIGHT",
        description="Weight reported for scenarios without any recorded history. Default: 1.0",
    )
    weight_store_url: str = Field(
        default="http://learning-service:4900",
        alias="WEIGHT_STORE_URL",
        description="Base URL of the learning service (http backend only)",
    )
    weight_store_api_key: Optional[str] = Field(default=None, alias="WEIGHT_STORE_API_KEY")
    weight_store_timeout_seconds: float = Field(
        default=2.0,
        alias="WEIGHT_STORE_TIMEOUT_SECONDS",
        description="Timeout for a single confidence weight lookup in seconds. Default: 2.0",
    )

    # Matching Configuration
    matcher_fallback_weight: float = Field(
        default=0.0,
        alias="MATCHER_FALLBACK_WEIGHT",
        description="Weight substituted when a confidence weight lookup fails or times out. Default: 0.0",
    )
    matcher_default_top_k: int = Field(default=3, alias="MATCHER_DEFAULT_TOP_K")

    # Database Configuration (postgres weight store backend)
    postgres_host: str = Field(default="postgres", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")
    postgres_db: str = Field(default="scenario_matcher", alias="POSTGRES_DB")
    postgres_user: str = Field(default="scenario_matcher", alias="POSTGRES_USER")
    postgres_password: Optional[str] = Field(default=None, alias="POSTGRES_PASSWORD")

    @field_validator("scenario_matcher_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("weight_store_backend")
    @classmethod
    def validate_weight_store_backend(cls, v: str) -> str:
        """Validate weight store backend name."""
        v_lower = v.lower()
        if v_lower not in WEIGHT_STORE_BACKENDS:
            raise ValueError(f"Weight store backend must be one of {WEIGHT_STORE_BACKENDS}")
        return v_lower

    @field_validator("weight_store_timeout_seconds")
    @classmethod
    def validate_weight_store_timeout(cls, v: float) -> float:
        """Validate weight lookup timeout is positive."""
        if v <= 0:
            raise ValueError("Weight store timeout must be positive")
        return v

    @field_validator("matcher_default_top_k")
    @classmethod
    def validate_default_top_k(cls, v: int) -> int:
        """Validate default top-K is non-negative."""
        if v < 0:
            raise ValueError("Default top-K must be non-negative")
        return v

    @property
    def database_url(self) -> str:
        """Get PostgreSQL connection URL."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    def validate_on_startup(self) -> None:
        """
        Validate configuration on startup.

        Checks the catalog path, port range and the settings required by the
        selected weight store backend.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        from .exceptions import ConfigurationError
        from .logging import get_logger

        logger = get_logger(__name__)
        errors = []

        catalog_path = Path(self.scenario_catalog_path)
        if not catalog_path.is_file():
            errors.append(f"Scenario catalog file not found: {self.scenario_catalog_path}")

        if not 1 <= self.scenario_matcher_port <= 65535:
            errors.append(f"Service port must be between 1 and 65535, got {self.scenario_matcher_port}")

        if self.weight_store_backend == "postgres":
            if not 1 <= self.postgres_port <= 65535:
                errors.append(f"PostgreSQL port must be between 1 and 65535, got {self.postgres_port}")
            if not self.postgres_password:
                errors.append("POSTGRES_PASSWORD is required for the postgres weight store backend")

        if self.weight_store_backend == "http" and not self.weight_store_url.startswith(("http://", "https://")):
            errors.append(f"WEIGHT_STORE_URL must be an http(s) URL, got {self.weight_store_url}")

        if errors:
            error_message = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            logger.error("Configuration validation failed", errors=errors)
            raise ConfigurationError(error_message)

        logger.info("Configuration validation passed", weight_store_backend=self.weight_store_backend)


# Global settings instance
settings = Settings()
