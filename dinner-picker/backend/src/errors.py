"""Error types raised across the dinner picker backend."""

from __future__ import annotations


class DinnerPickerError(Exception):
    """Base class for errors raised by this package."""


class ProviderError(DinnerPickerError):
    """The generative model call failed (transport, auth, quota)."""


class ProviderUnavailable(ProviderError):
    """The model answered but returned no text."""


class RecommendationFailed(DinnerPickerError):
    """User-facing failure of a recommendation request.

    Carries only a readable message; the underlying provider error is chained.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LocationUnavailable(DinnerPickerError):
    """The diner's location was denied, unsupported or not yet known."""


class PersistenceError(DinnerPickerError):
    """Favorites could not be read from or written to storage."""


class ActionUnavailable(DinnerPickerError):
    """An action was requested while its controls would be disabled."""
