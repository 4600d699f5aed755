"""Custom exception hierarchy for the Sitescope engines."""

from __future__ import annotations


class SitescopeError(Exception):
    """Base exception for all Sitescope errors."""


class TuningError(SitescopeError):
    """Raised when a coefficient table cannot be loaded or validated."""


class InputValidationError(SitescopeError):
    """Raised when a raw payload cannot be coerced into an engine input."""
