"""Error taxonomy for the generation core."""
from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised before any work starts when a generation request is invalid."""


class ExhaustedAttemptsWarning(UserWarning):
    """Crater placement ran out of attempts before reaching its target count."""


__all__ = ["ConfigurationError", "ExhaustedAttemptsWarning"]
