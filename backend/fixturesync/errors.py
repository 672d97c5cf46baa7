"""
backend/fixturesync/errors.py

Purpose:
    Exception hierarchy for sync runs. Fetch failures carry the status value
    written to the sync status record so operators can tell throttling apart
    from generic upstream trouble.
"""


class SyncError(Exception):
    """Base class for every failure surfaced by a sync run."""

    status_value = "error"


class ConfigurationError(SyncError):
    """Required provider credentials or identifiers are missing."""


class SyncFetchError(SyncError):
    """The upstream fetch phase failed; the status record is already written."""

    def __init__(self, message: str, *, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider


class ProviderRateLimitError(SyncFetchError):
    status_value = "rate_limit"

    def __init__(self, message: str, *, provider: str = "", retry_after: float | None = None) -> None:
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


class ProviderFetchError(SyncFetchError):
    def __init__(self, message: str, *, provider: str = "", status_code: int | None = None) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
