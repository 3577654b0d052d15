import logging
from typing import Any, List, Optional, Tuple

from listing_gateway.connectors.base import BaseConnector
from listing_gateway.core.errors import MalformedUpstreamPayload
from listing_gateway.schemas.listing import Listing, ListingImage
from .image_resolver import ImageResolver
from .normalization import normalize_images, normalize_listings

logger = logging.getLogger(__name__)


class ListingRepository:
    """In-memory holder of the latest normalized listing set.

    Each refresh replaces the whole set in one assignment. Overlapping
    refreshes are not coalesced; the last one to finish wins.
    """

    def __init__(self, connector: BaseConnector, resolver: ImageResolver) -> None:
        self.connector = connector
        self.resolver = resolver
        self._listings: Tuple[Listing, ...] = ()
        self._loaded = False

    @property
    def listings(self) -> Tuple[Listing, ...]:
        return self._listings

    async def _fetch(self, what: str) -> Any:
        try:
            return await self.connector.fetch_payload(what)
        except MalformedUpstreamPayload as exc:
            logger.warning("Upstream %s payload could not be decoded: %s", what, exc)
            return None

    async def refresh(self) -> List[Listing]:
        payload = await self._fetch("listings")
        listings = tuple(normalize_listings(payload, self.resolver))
        self._listings = listings
        self._loaded = True
        return list(listings)

    async def get_all(self) -> List[Listing]:
        if not self._loaded:
            await self.refresh()
        return list(self._listings)

    async def get_by_id(self, listing_id: Any) -> Optional[Listing]:
        if not self._listings:
            await self.refresh()

        listings = self._listings
        wanted = str(listing_id)
        for index, listing in enumerate(listings):
            if str(listing.id) != wanted:
                continue
            if listing.image_url is None:
                image_url = self.resolver.lookup(listing.id)
                if image_url:
                    listing = listing.model_copy(update={"image_url": image_url})
                    if self._listings is listings:
                        self._listings = listings[:index] + (listing,) + listings[index + 1 :]
            return listing
        return None

    async def get_images(self) -> List[ListingImage]:
        payload = await self._fetch("images")
        return normalize_images(payload, self.resolver)
