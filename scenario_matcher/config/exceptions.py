"""
Custom exception classes for the scenario matcher.

Provides structured error handling with appropriate exception types
for different error scenarios.
"""


class ScenarioMatcherError(Exception):
    """Base exception for all scenario matcher errors."""

    pass


class ConfigurationError(ScenarioMatcherError):
    """Raised when configuration is invalid or missing."""

    pass


class EncodingError(ScenarioMatcherError):
    """Raised when an observation cannot be encoded into a feature vector."""

    pass


class CatalogError(ScenarioMatcherError):
    """Raised when scenario catalog operations fail."""

    pass


class CatalogLoadError(CatalogError):
    """Raised when the scenario catalog file is missing or invalid."""

    pass


class ScenarioNotFoundError(CatalogError):
    """Raised when a scenario id is not in the catalog."""

    pass


class WeightStoreError(ScenarioMatcherError):
    """Raised when a confidence weight lookup fails."""

    pass


class DatabaseError(ScenarioMatcherError):
    """Raised when database operations fail."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when database connection fails."""

    pass


class DatabaseQueryError(DatabaseError):
    """Raised when a database query fails."""

    pass
