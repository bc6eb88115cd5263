"""Exceptions raised by the crawler.

    CrawlError
    +-- FetchError    (transport failure or non-2xx status)
    +-- DecodeError   (malformed JSON or unexpected payload shape)
    +-- StorageError  (open, schema, begin, prepare or commit failure)
"""

from typing import Optional


class CrawlError(Exception):
    """Base exception for crawler errors."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.message = message
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} ({self.url})"
        return self.message


class FetchError(CrawlError):
    """Raised when a request fails or returns a non-success status."""


class DecodeError(CrawlError):
    """Raised when a response body cannot be decoded into the expected shape."""


class StorageError(CrawlError):
    """Raised when the database cannot be opened, initialized or committed."""
