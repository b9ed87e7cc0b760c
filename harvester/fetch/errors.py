"""Fetch error taxonomy."""
from pathlib import Path
from typing import Optional


class FetchError(Exception):
    """A single failed attempt that is worth retrying."""


class RateLimited(FetchError):
    """HTTP 429. `retry_after` is the server hint in seconds, 0 when absent."""

    def __init__(self, retry_after: float = 0):
        super().__init__("rate limit")
        self.status_code = 429
        self.retry_after = retry_after


class TransientHTTPError(FetchError):
    """Any other non-2xx response."""

    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class NetworkError(FetchError):
    """No usable response: transport failure or a body we could not parse."""

    def __init__(self, cause: object):
        super().__init__(f"network error: {cause}")
        self.cause = cause


class FetchExhausted(Exception):
    """Raised once retries for a URL are used up."""

    def __init__(self, url: str, reason: FetchError, attempts: int):
        super().__init__(f"{reason} ({url}, {attempts} attempts)")
        self.url = url
        self.reason = reason
        self.attempts = attempts


class CheckpointCorrupt(Exception):
    """Checkpoint file exists but cannot be trusted."""

    def __init__(self, path: Path, cause: Optional[Exception] = None):
        super().__init__(f"Unreadable checkpoint {path}: {cause}")
        self.path = path
        self.cause = cause
