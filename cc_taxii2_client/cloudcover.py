"""CloudCover-specific TAXII client."""

import logging
from typing import Mapping, Optional

from cc_taxii2_client.client import TaxiiClient
from cc_taxii2_client.errors import CollectionError
from cc_taxii2_client.models import CCIndicator, ObjectFilters

logger = logging.getLogger("cc_taxii2_client.cloudcover")

PUBLIC_ROOT = "api"
DEFAULT_LIMIT = 1000


class CCTaxiiClient(TaxiiClient):
    """TAXII client with CloudCover conventions.

    CloudCover serves shared indicators under the public ``api`` root and
    account-specific indicators under a root named after the account.
    """

    @property
    def account(self) -> str:
        return self.config.credentials.username

    def root_for(self, private: bool) -> str:
        return self.account if private else PUBLIC_ROOT

    async def get_collection_ids(self, root_path: str) -> list[str]:
        """Return the ids of every collection under an API root."""
        return [c.id for c in await self.get_collections(root_path)]

    async def get_cc_indicators(
        self,
        collection_id: Optional[str] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        private: bool = False,
        added_after: Optional[str] = None,
        matches: Optional[Mapping[str, str]] = None,
        follow_pages: bool = False,
    ) -> list[CCIndicator]:
        """
        Retrieve CloudCover indicators from a collection.

        Args:
            collection_id: Collection to read. Defaults to the first collection
                of the selected root.
            limit: Maximum objects per page; None uses the default of 1000.
            private: Read the account root instead of the public one.
            added_after: Only return objects added after this timestamp.
            matches: STIX match filters keyed by field, e.g. ``{"type": "indicator"}``.
            follow_pages: Keep requesting pages while the server reports more.

        Returns:
            Indicators in the order the server returned them.

        Raises:
            CollectionError: If no collection is available for the root.
        """
        root = self.root_for(private)
        if collection_id is None:
            collection_ids = await self.get_collection_ids(root)
            if not collection_ids:
                raise CollectionError(f"No collections available under '{root}'")
            collection_id = collection_ids[0]

        matches = matches or {}
        filters = ObjectFilters(
            added_after=added_after,
            limit=limit if limit is not None else DEFAULT_LIMIT,
            match_type=matches.get("type"),
            match_id=matches.get("id"),
        )

        indicators: list[CCIndicator] = []
        cursor: Optional[str] = None
        while True:
            envelope = await self.get_objects(root, collection_id, filters, next=cursor)
            indicators.extend(CCIndicator.from_dict(obj) for obj in envelope.objects)
            if not (follow_pages and envelope.more):
                break
            cursor = envelope.next
            logger.debug(f"Following page cursor {cursor} ({len(indicators)} so far)")

        logger.info(f"Retrieved {len(indicators)} indicator(s) from {root}/{collection_id}")
        return indicators
