from __future__ import annotations


class ChaosVizError(Exception):
    """Base class for engine errors."""


class InvalidConfigurationError(ChaosVizError, ValueError):
    """Raised when a model, draw config or buffer is built with bad parameters."""


class ModelDomainError(ChaosVizError, ArithmeticError):
    """Raised when a derivative is undefined at the given state."""
