"""Exceptions raised while resolving and downloading version assets."""

from __future__ import annotations


class MCAssetError(Exception):
    """Base class for all mcasset_tools errors."""


class NetworkError(MCAssetError):
    """Raised on transport failures or non-success HTTP status codes.

    Attributes:
        url: URL that was being fetched
        status_code: HTTP status code, if a response was received
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ParseError(MCAssetError):
    """Raised when a response body or package is malformed."""

    def __init__(self, message: str, *, url: str | None = None):
        self.url = url
        super().__init__(message)


class NotFoundError(MCAssetError, LookupError):
    """Raised when a version id is not present in the catalog."""

    def __init__(self, message: str, *, version_id: str | None = None):
        self.version_id = version_id
        super().__init__(message)


class UnsupportedVersionError(MCAssetError):
    """Raised for versions using a legacy or pre-1.6 asset index."""

    def __init__(self, message: str, *, version_id: str | None = None):
        self.version_id = version_id
        super().__init__(message)
