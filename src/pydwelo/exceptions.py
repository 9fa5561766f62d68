"""Custom exception hierarchy for pydwelo."""

from __future__ import annotations


class DweloError(Exception):
    """Base exception for all pydwelo errors."""


class DweloConfigError(DweloError):
    """Invalid or missing configuration."""


class DweloTransportError(DweloError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class DweloApiError(DweloError):
    """API answered, but with a body we cannot use."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)
