"""Pipeline exception hierarchy."""

from __future__ import annotations

_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(PipelineError):
    """Configuration could not be loaded or validated."""


class InvalidInput(PipelineError, ValueError):
    """Missing or empty user input (query or text)."""


class CredentialError(PipelineError):
    """Bearer credentials could not be resolved."""


class StorageError(PipelineError):
    """A scored item could not be written."""


class UpstreamError(PipelineError):
    """Non-success response (or no response) from an upstream API."""

    def __init__(self, service: str, status: int | None, body: str = "") -> None:
        self.service = service
        self.status = status
        self.body = body
        if status is None:
            message = f"{service} request failed: {body}"
        else:
            message = f"{service} API error: {status} - {body}"
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Whether the caller may reasonably retry the request."""
        return self.status is None or self.status in _RETRYABLE_STATUSES


class MalformedResponseError(UpstreamError):
    """Upstream answered 2xx but the payload could not be interpreted."""

    def __init__(self, service: str, payload: object, reason: str) -> None:
        self.payload = payload
        self.reason = reason
        super().__init__(service, None, f"unexpected response ({reason}): {payload!r}")

    @property
    def retryable(self) -> bool:
        return False


class PageFetchError(PipelineError):
    """A page could not be fetched; fatal for the invocation."""

    def __init__(self, cause: UpstreamError, processed: int) -> None:
        self.cause = cause
        self.processed = processed
        super().__init__(f"{cause} ({processed} items already stored)")
