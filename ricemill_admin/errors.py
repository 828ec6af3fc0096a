from __future__ import annotations

"""Exception types shared by the API client, the normalizer and the workflow.

- `RateValidationError`: client-side checks that fail before any network call
- `MalformedResponse`: a response body matched none of the known wire shapes
- `RequestFailed`: the transport failed (connection refused, DNS, timeout)
- `ApiError`: the server answered with a non-2xx status
"""

from typing import Any, Optional

MALFORMED_RESPONSE_MESSAGE = "Unexpected response from server."


class RateValidationError(ValueError):
    """A rate cell, selection or confirmation token failed local validation."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class MalformedResponse(ValueError):
    def __init__(self, message: str = MALFORMED_RESPONSE_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class RequestFailed(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiError(RequestFailed):
    """Non-2xx HTTP response carrying the status code and the parsed body."""

    def __init__(self, message: str, status: int, data: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.data = data

    def __str__(self) -> str:
        return self.message


__all__ = [
    "ApiError",
    "MALFORMED_RESPONSE_MESSAGE",
    "MalformedResponse",
    "RateValidationError",
    "RequestFailed",
]
