"""HTTP transport for TAXII 2.1 requests."""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from cc_taxii2_client.config import TaxiiConfig
from cc_taxii2_client.errors import (
    AuthenticationError,
    ConfigurationError,
    DeserializationError,
    NotFoundError,
    TransportError,
)
from cc_taxii2_client.models import TAXII_MEDIA_TYPE

logger = logging.getLogger("cc_taxii2_client.transport")


class TaxiiTransport:
    """Issues authenticated GET/POST requests and maps failures to TaxiiError.

    One ``aiohttp.ClientSession`` is created lazily and reused for every
    request until :meth:`close` is called. Failures are raised immediately;
    there are no retries.
    """

    def __init__(self, config: TaxiiConfig) -> None:
        self._base_url = config.base_url
        self._timeout = config.timeout
        self._headers = {
            "Accept": TAXII_MEDIA_TYPE,
            "Content-Type": TAXII_MEDIA_TYPE,
            "Authorization": config.credentials.authorization_header(),
        }
        self._session: aiohttp.ClientSession | None = None

    def url_for(self, path: str) -> str:
        """Join the configured base URL with a resource path."""
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self._headers)
        return self._session

    async def get(
        self,
        path: str,
        query: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """GET a resource and return its decoded JSON body."""
        return await self._request("GET", path, params=query, timeout=timeout)

    async def post(
        self, path: str, body: dict[str, Any], timeout: Optional[float] = None
    ) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        return await self._request("POST", path, json_body=body, timeout=timeout)

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json_body: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        if timeout is None:
            timeout = self._timeout
        elif timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {timeout}")
        url = self.url_for(path)
        session = await self._get_session()
        client_timeout = aiohttp.ClientTimeout(total=timeout)

        logger.debug(f"{method} {url} params={params or {}}")
        try:
            async with session.request(
                method, url, params=params or None, json=json_body, timeout=client_timeout
            ) as response:
                self._check_status(response.status, url)
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise DeserializationError(
                        f"Invalid JSON in response: {e}", status=response.status, url=url
                    ) from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request to {url} timed out", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

    @staticmethod
    def _check_status(status: int, url: str) -> None:
        if 200 <= status < 300:
            return
        if status in (401, 403):
            raise AuthenticationError("Authentication rejected by TAXII server", status, url)
        if status == 404:
            raise NotFoundError(f"Resource not found: {url}", status, url)
        raise TransportError("Unexpected response from TAXII server", status, url)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
