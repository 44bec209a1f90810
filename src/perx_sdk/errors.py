from __future__ import annotations

from typing import Any, Optional


class PerxError(RuntimeError):
    """Base error for categorized Perx API failures."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PerxUnauthorizedError(PerxError):
    """Raised when Perx answers 401 on token issuance or customer detail."""

    def __init__(self, message: str = "Unauthorized", body: Optional[Any] = None) -> None:
        super().__init__(message, status_code=401, body=body)


class PerxBadRequestError(PerxError):
    """Raised when an argument fails client-side validation (no request is sent)."""


class PerxAPIError(PerxError):
    """Raised for non-success HTTP responses passed through by the transport."""


class PerxResponseParseError(PerxError):
    """Raised when a success response does not fit the expected model."""


class PerxConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""
