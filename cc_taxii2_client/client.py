"""TAXII 2.1 resource client."""

import logging
from typing import Any, Iterable, Mapping, Optional

from cc_taxii2_client.config import TaxiiConfig
from cc_taxii2_client.models import (
    APIRoot,
    Collection,
    Discovery,
    Envelope,
    FiltersArg,
    ManifestRecord,
    Status,
    coerce_filters,
    parse_collections,
    parse_manifest,
)
from cc_taxii2_client.transport import TaxiiTransport

logger = logging.getLogger("cc_taxii2_client.client")


def _root(root_path: str) -> str:
    """Normalize an API root path: ``"/api/"`` and ``"api"`` are the same root."""
    return root_path.strip("/")


class TaxiiClient:
    """Typed access to the TAXII 2.1 REST endpoints.

    Each method performs exactly one HTTP round trip. Pagination is left to
    the caller: pass the ``next`` value of a returned Envelope back in to
    fetch the following page.

    Usage::

        async with TaxiiClient(config) as client:
            discovery = await client.discover()
    """

    def __init__(self, config: TaxiiConfig, transport: Optional[TaxiiTransport] = None):
        self.config = config
        self.transport = transport or TaxiiTransport(config)

    async def __aenter__(self) -> "TaxiiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def discover(self, timeout: Optional[float] = None) -> Discovery:
        """Fetch the server discovery document."""
        return Discovery.from_dict(await self.transport.get("taxii2/", timeout=timeout))

    async def get_api_root(
        self, root_path: str, timeout: Optional[float] = None
    ) -> APIRoot:
        data = await self.transport.get(f"{_root(root_path)}/", timeout=timeout)
        return APIRoot.from_dict(data)

    async def get_collections(
        self, root_path: str, timeout: Optional[float] = None
    ) -> list[Collection]:
        """List the collections of an API root, in server order."""
        data = await self.transport.get(
            f"{_root(root_path)}/collections/", timeout=timeout
        )
        collections = parse_collections(data)
        logger.debug(f"{len(collections)} collection(s) under '{_root(root_path)}'")
        return collections

    async def get_collection(
        self, root_path: str, collection_id: str, timeout: Optional[float] = None
    ) -> Collection:
        data = await self.transport.get(
            f"{_root(root_path)}/collections/{collection_id}/", timeout=timeout
        )
        return Collection.from_dict(data)

    async def get_objects(
        self,
        root_path: str,
        collection_id: str,
        filters: FiltersArg = None,
        next: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Envelope:
        """
        Fetch one page of objects from a collection.

        Args:
            root_path: API root, e.g. ``"api"``.
            collection_id: Collection identifier.
            filters: ObjectFilters or a mapping using the wire names
                ``added_after``, ``limit``, ``match[type]``, ``match[id]``.
            next: Cursor from the previous Envelope when ``more`` was true.
            timeout: Seconds for this request, overriding the configured timeout.

        Returns:
            The decoded Envelope.
        """
        params = self._query(filters, next)
        data = await self.transport.get(
            f"{_root(root_path)}/collections/{collection_id}/objects/",
            query=params,
            timeout=timeout,
        )
        return Envelope.from_dict(data)

    async def get_manifest(
        self,
        root_path: str,
        collection_id: str,
        filters: FiltersArg = None,
        next: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> list[ManifestRecord]:
        """Fetch manifest records of a collection; filters as for get_objects."""
        params = self._query(filters, next)
        data = await self.transport.get(
            f"{_root(root_path)}/collections/{collection_id}/manifest/",
            query=params,
            timeout=timeout,
        )
        return parse_manifest(data)

    async def add_objects(
        self,
        root_path: str,
        collection_id: str,
        objects: Iterable[Mapping[str, Any]],
        timeout: Optional[float] = None,
    ) -> Status:
        """POST STIX objects to a writable collection."""
        body = Envelope(objects=[dict(obj) for obj in objects]).to_dict()
        logger.debug(f"Adding {len(body['objects'])} object(s) to {collection_id}")
        data = await self.transport.post(
            f"{_root(root_path)}/collections/{collection_id}/objects/",
            body,
            timeout=timeout,
        )
        return Status.from_dict(data)

    async def get_status(
        self, root_path: str, status_id: str, timeout: Optional[float] = None
    ) -> Status:
        data = await self.transport.get(
            f"{_root(root_path)}/status/{status_id}/", timeout=timeout
        )
        return Status.from_dict(data)

    @staticmethod
    def _query(filters: FiltersArg, next: Optional[str]) -> dict[str, str]:
        params = coerce_filters(filters).to_params()
        if next is not None:
            params["next"] = next
        return params
