# articlegen/errors.py
from __future__ import annotations
from typing import Any, Optional


class ArticleGenError(Exception):
    """Base class for everything this package raises on purpose."""


class ValidationError(ArticleGenError):
    """Malformed or missing request fields. Raised before any network call."""


class ConfigurationError(ArticleGenError):
    """Missing credential or schema document. Fatal, never retried."""


class UpstreamError(ArticleGenError):
    """
    The generative API failed (or the degradation cascade ran out).

    status_code is 0 for transport failures (timeouts, refused connections).
    body holds the raw upstream error body only when APP_DEBUG is on.
    progress is filled in by the seeding loop with what was added before the failure.
    """

    def __init__(self, message: str, status_code: int = 0, body: str = "", progress: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.progress = progress

    @property
    def is_client_error(self) -> bool:
        return self.status_code in (400, 422)


class SchemaMismatchError(UpstreamError):
    """The response envelope held no JSON object under any known shape."""


class StorageError(ArticleGenError):
    """Idea pool file could not be read or written."""
