#!/usr/bin/env python3
"""
Exception hierarchy for the Rust documentation bridge.

Validation errors are raised before any request is made. HTTP client errors
describe what went wrong talking to an upstream. Every scraping operation
wraps downstream failures in ScraperError, keeping the original as __cause__.
"""

from typing import Sequence, Tuple


class RustDocsError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(RustDocsError, ValueError):
    """A required argument is missing, empty or malformed."""


class HttpClientError(RustDocsError):
    """Base class for failures talking to an upstream origin."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class UpstreamHTTPError(HttpClientError):
    """The upstream answered with a non-2xx status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"HTTP error {status} from {url}", url)
        self.status = status


class TransportError(HttpClientError):
    """The request never produced a response."""

    def __init__(self, url: str, reason: str = ""):
        message = f"Transport failure requesting {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, url)


class RequestTimeoutError(TransportError):
    """No response arrived within the request timeout."""

    def __init__(self, url: str, timeout: float):
        super().__init__(url, f"request aborted after {timeout:g}s")
        self.timeout = timeout


class ResponseShapeError(RustDocsError):
    """The response body is not the kind the operation expects."""

    def __init__(self, expected: str, received: str):
        super().__init__(f"Expected {expected} response but got {received}")
        self.expected = expected
        self.received = received


class SourceNotFoundError(RustDocsError):
    """Every candidate source URL failed."""

    def __init__(self, attempts: Sequence[Tuple[str, Exception]]):
        self.attempts = list(attempts)
        tried = "; ".join(f"{url} ({error})" for url, error in self.attempts)
        super().__init__(f"No source page found. Tried: {tried}")

    @property
    def attempted_urls(self):
        return [url for url, _ in self.attempts]


class ScraperError(RustDocsError):
    """A scraping operation failed; __cause__ holds the original error."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation
