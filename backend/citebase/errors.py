"""
Error types shared by the upload and query engines.

Engines never raise HTTP errors; routes in ``main`` translate these.
"""

from typing import Optional


class CitebaseError(Exception):
    """Base class for all service errors."""


class ValidationError(CitebaseError):
    """Client-caused problem with a request. Always surfaced as 400."""


class BatchTooLargeError(ValidationError):
    """More files were submitted than a single batch allows."""

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Cannot upload more than {limit} files at a time.")


class UpstreamError(CitebaseError):
    """A collaborator (knowledge service, storage) reported a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class LangbaseError(UpstreamError):
    """Error returned by (or while talking to) the Langbase API."""
