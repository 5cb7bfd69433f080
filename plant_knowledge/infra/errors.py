from __future__ import annotations

from typing import Literal, Optional


class PlantApiError(Exception):
    """Unclassified failure talking to the plant data API."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlantNotFoundError(PlantApiError):
    """The remote source has no record for the requested species."""


class PlantAuthError(PlantApiError):
    """The API token was rejected. Not retried."""


class PlantRateLimitError(PlantApiError):
    """Either the local sliding window or the upstream API refused the call."""

    def __init__(
        self,
        message: str,
        *,
        scope: Literal["local", "upstream"],
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.scope = scope


class PlantTransientError(PlantApiError):
    """Network, timeout or 5xx failure that persisted through every retry."""
