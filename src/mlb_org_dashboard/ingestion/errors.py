"""Upstream failure taxonomy.

Every failed request surfaces as an ``UpstreamError`` naming the operation
that failed and the underlying cause. Missing-but-optional fields are not
errors; extractors default them instead.
"""

from typing import Optional


class UpstreamError(Exception):
    """A request to the MLB Stats API failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None, message: str = ""):
        self.operation = operation
        self.cause = cause
        detail = message or (str(cause) if cause else "request failed")
        super().__init__(f"{operation}: {detail}")


class NetworkError(UpstreamError):
    """The request could not complete (connect, read or timeout failure)."""


class UpstreamStatusError(UpstreamError):
    """The API answered with a non-success status code."""

    def __init__(self, operation: str, status_code: int, cause: Optional[BaseException] = None):
        self.status_code = status_code
        super().__init__(operation, cause, message=f"HTTP {status_code}")


class UpstreamShapeError(UpstreamError):
    """The response body is not the JSON object the endpoint promises."""
