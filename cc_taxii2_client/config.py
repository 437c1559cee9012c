"""Configuration and credentials for the TAXII client."""

import base64
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

import validators

from cc_taxii2_client.errors import ConfigurationError

DEFAULT_BASE_URL = "https://taxii2.cloudcover.net"
DEFAULT_TIMEOUT = 30.0

USERNAME_ENV = "TAXII_USERNAME"
API_KEY_ENV = "TAXII_API_KEY"
BASE_URL_ENV = "TAXII_BASE_URL"
TIMEOUT_ENV = "TAXII_TIMEOUT"


@dataclass(frozen=True)
class Credentials:
    """Username and API key used for HTTP Basic authentication."""

    username: str
    api_key: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.username or not self.username.strip():
            raise ConfigurationError("TAXII username must not be empty")
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError("TAXII API key must not be empty")

    def authorization_header(self) -> str:
        """Return the value for the ``Authorization`` request header."""
        token = base64.b64encode(f"{self.username}:{self.api_key}".encode("utf-8"))
        return f"Basic {token.decode('ascii')}"


def _validate_base_url(value: str) -> str:
    """Check that the base URL is an absolute http(s) URL and strip trailing slashes."""
    url = value.strip().rstrip("/")
    if not url.lower().startswith(("http://", "https://")) or not validators.url(url):
        raise ConfigurationError(f"Invalid TAXII base URL: '{value}'")
    return url


@dataclass
class TaxiiConfig:
    """Client configuration passed explicitly to the client constructor."""

    credentials: Credentials
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        self.base_url = _validate_base_url(self.base_url)
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout}")


def _float_or_default(value: Optional[str], name: str, default: float) -> float:
    """Convert string to float or return the default."""
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}: '{value}' is not a number") from None


def load_config(environ: Optional[Mapping[str, str]] = None) -> TaxiiConfig:
    """Load configuration from environment variables."""
    env = os.environ if environ is None else environ

    for var in (USERNAME_ENV, API_KEY_ENV):
        if not env.get(var):
            raise ConfigurationError(f"{var} is required")

    return TaxiiConfig(
        credentials=Credentials(env[USERNAME_ENV], env[API_KEY_ENV]),
        base_url=env.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
        timeout=_float_or_default(env.get(TIMEOUT_ENV), TIMEOUT_ENV, DEFAULT_TIMEOUT),
    )
