"""Custom exceptions for the chart engine."""


from __future__ import annotations


class ChartEngineError(Exception):
    """Base exception for the project."""


class ConfigError(ChartEngineError):
    """Raised when configuration files are missing/invalid."""


class ValidationError(ChartEngineError):
    """Raised for invalid input values (e.g., malformed configuration payloads)."""


class ConfigurationIncomplete(ChartEngineError):
    """Raised when a chart configuration lacks a field its template requires."""


class InvalidReference(ChartEngineError):
    """Raised when a field, table or slicer id points at an entity that no longer exists."""


class EmptyResult(ChartEngineError):
    """Raised when filtering leaves no rows to aggregate."""


class RenderFailure(ChartEngineError):
    """Raised for unexpected failures while aggregating or drawing a chart."""


class DataSourceError(ChartEngineError):
    """Raised when a data file cannot be read."""
