"""Exceptions shared by the noise and streaming packages."""


class TerrainError(Exception):
    """Base exception for terrain generation errors."""

    pass


class InvalidInput(TerrainError, ValueError):
    """Raised for non-finite coordinates or a missing height field."""

    pass


class ConfigurationError(TerrainError, ValueError):
    """Raised when construction parameters are missing or out of range."""

    pass


class ResourceError(TerrainError, RuntimeError):
    """Raised when the rendering side fails to create, update or dispose a chunk."""

    pass
