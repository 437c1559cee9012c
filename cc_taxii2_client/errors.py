"""Error types raised by the TAXII client."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Failure categories a caller can branch on."""

    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    DESERIALIZATION = "deserialization"
    COLLECTION = "collection"


class TaxiiError(Exception):
    """Base class for every error raised by this package."""

    kind: ErrorKind

    def __init__(
        self, message: str, status: Optional[int] = None, url: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message


class ConfigurationError(TaxiiError):
    """Missing or invalid credentials, URL or filter settings."""

    kind = ErrorKind.CONFIGURATION


class AuthenticationError(TaxiiError):
    """The server rejected the credentials (401/403)."""

    kind = ErrorKind.AUTHENTICATION


class NotFoundError(TaxiiError):
    """The requested resource does not exist (404)."""

    kind = ErrorKind.NOT_FOUND


class TransportError(TaxiiError):
    """Network failure, timeout or unexpected server status."""

    kind = ErrorKind.TRANSPORT


class DeserializationError(TaxiiError):
    """Response body is not valid JSON or lacks required fields."""

    kind = ErrorKind.DESERIALIZATION


class CollectionError(TaxiiError):
    """No collection could be selected for an API root."""

    kind = ErrorKind.COLLECTION
