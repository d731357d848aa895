"""Error types raised by the catalog extraction pipeline."""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog extraction errors."""


class FetchError(CatalogError):
    """A page could not be fetched after every retry attempt."""

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException] = None):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        detail = f"{type(last_error).__name__}: {last_error}" if last_error else "no response"
        super().__init__(f"Failed to fetch {url} after {attempts} attempts ({detail})")


class ExtractionError(CatalogError):
    """A single candidate element could not be turned into a record."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class PersistenceError(CatalogError):
    """Writing results to a file or database failed."""


class RunFailedError(CatalogError):
    """The base page failed terminally and the fallback catalog is disabled."""
