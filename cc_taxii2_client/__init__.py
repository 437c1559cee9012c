"""Minimal CloudCover TAXII 2.1 client library."""

from cc_taxii2_client.client import TaxiiClient
from cc_taxii2_client.cloudcover import CCTaxiiClient
from cc_taxii2_client.config import Credentials, TaxiiConfig, load_config
from cc_taxii2_client.errors import (
    AuthenticationError,
    CollectionError,
    ConfigurationError,
    DeserializationError,
    ErrorKind,
    NotFoundError,
    TaxiiError,
    TransportError,
)
from cc_taxii2_client.models import (
    APIRoot,
    CCIndicator,
    Collection,
    Discovery,
    Envelope,
    ManifestRecord,
    ObjectFilters,
    Status,
)

__version__ = "0.1.5"

__all__ = [
    "APIRoot",
    "AuthenticationError",
    "CCIndicator",
    "CCTaxiiClient",
    "Collection",
    "CollectionError",
    "ConfigurationError",
    "Credentials",
    "DeserializationError",
    "Discovery",
    "Envelope",
    "ErrorKind",
    "ManifestRecord",
    "NotFoundError",
    "ObjectFilters",
    "Status",
    "TaxiiClient",
    "TaxiiConfig",
    "TaxiiError",
    "TransportError",
    "load_config",
]
