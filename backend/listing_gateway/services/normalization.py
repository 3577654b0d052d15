import logging
import time
from typing import Any, List, Mapping, Optional

from listing_gateway.schemas.listing import Listing, ListingImage
from .image_resolver import ImageResolver

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unnamed Listing"
DEFAULT_IMAGE_TITLE = "Untitled Listing"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_ADDRESS = "Address not provided"
DEFAULT_HOUSEHOLD = "No household information available"
DEFAULT_PRICE = "Price not provided"
DEFAULT_HOUSE_RULES = "No specific house rules"


def is_valid_envelope(payload: Any) -> bool:
    return (
        isinstance(payload, Mapping)
        and payload.get("status") == "success"
        and isinstance(payload.get("result"), list)
    )


def _text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _first(record: Mapping[str, Any], *fields: str) -> Optional[str]:
    for field in fields:
        value = _text(record.get(field))
        if value:
            return value
    return None


def _listing_id(record: Mapping[str, Any], stamp: int, index: int) -> str:
    # synthesized ids are not stable across reloads
    return _text(record.get("id")) or f"{stamp}-{index}"


def normalize_listing(record: Mapping[str, Any], resolver: ImageResolver, listing_id: str) -> Listing:
    return Listing(
        id=listing_id,
        name=_first(record, "name", "externalListingName") or DEFAULT_NAME,
        description=_first(record, "description") or DEFAULT_DESCRIPTION,
        address=_first(record, "address") or DEFAULT_ADDRESS,
        household=_first(record, "household") or DEFAULT_HOUSEHOLD,
        price=_first(record, "price", "listingPrice") or DEFAULT_PRICE,
        house_rules=_first(record, "houseRules") or DEFAULT_HOUSE_RULES,
        image_url=resolver.resolve_with_fallback(record),
    )


def normalize_listings(payload: Any, resolver: ImageResolver) -> List[Listing]:
    if not is_valid_envelope(payload) or not payload["result"]:
        logger.warning("No listings found or payload is incorrectly structured: %r", payload)
        return []

    stamp = int(time.time() * 1000)
    listings: List[Listing] = []
    for index, record in enumerate(payload["result"]):
        if not isinstance(record, Mapping):
            logger.warning("Skipping non-object listing record at index %s", index)
            continue
        listings.append(normalize_listing(record, resolver, _listing_id(record, stamp, index)))
    logger.info("Normalized %s listings", len(listings))
    return listings


def normalize_images(payload: Any, resolver: ImageResolver) -> List[ListingImage]:
    """Image entries for every record that resolves to a URL.

    An invalid envelope yields the whole static table instead of an empty list.
    """
    if not is_valid_envelope(payload):
        logger.warning("Image payload is incorrectly structured, serving static image table")
        return resolver.fallback_images()

    stamp = int(time.time() * 1000)
    images: List[ListingImage] = []
    for index, record in enumerate(payload["result"]):
        if not isinstance(record, Mapping):
            continue
        url = resolver.resolve_with_fallback(record)
        if not url:
            continue
        images.append(
            ListingImage(
                id=_listing_id(record, stamp, index),
                url=url,
                title=_first(record, "name", "externalListingName") or DEFAULT_IMAGE_TITLE,
            )
        )
    return images
