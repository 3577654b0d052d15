import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from listing_gateway.schemas.listing import ListingImage

logger = logging.getLogger(__name__)

DIRECT_IMAGE_FIELDS = ("imageUrl", "photo", "thumbnailUrl", "coverImageUrl")
ARRAY_IMAGE_FIELDS = ("images", "photos", "gallery")
ENTRY_URL_FIELDS = ("url", "imageUrl", "thumbnailUrl")


def load_static_image_table(path: Path) -> Mapping[str, str]:
    """Read the id -> image URL fallback table from a JSON object file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Static image table at {path} must be a JSON object")
    table = {str(key): str(value) for key, value in data.items() if value}
    logger.info("Loaded %s static image entries from %s", len(table), path)
    return MappingProxyType(table)


def _first_text(record: Mapping[str, Any], fields: tuple[str, ...]) -> Optional[str]:
    for field in fields:
        value = record.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def _image_from_entry(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry or None
    if isinstance(entry, Mapping):
        return _first_text(entry, ENTRY_URL_FIELDS)
    return None


class ImageResolver:
    """Finds a display image for a raw upstream record.

    Direct URL fields are tried first, then the first non-empty image array.
    The static table is only consulted by the ``*_fallback`` helpers.
    """

    def __init__(self, static_images: Mapping[str, str]) -> None:
        self.static_images = static_images

    def resolve(self, record: Mapping[str, Any]) -> Optional[str]:
        direct = _first_text(record, DIRECT_IMAGE_FIELDS)
        if direct:
            return direct

        for field in ARRAY_IMAGE_FIELDS:
            entries = record.get(field)
            if isinstance(entries, list) and entries:
                # the first non-empty array decides, even if its head is unusable
                return _image_from_entry(entries[0])
        return None

    def lookup(self, listing_id: Any) -> Optional[str]:
        if listing_id is None:
            return None
        return self.static_images.get(str(listing_id))

    def resolve_with_fallback(self, record: Mapping[str, Any]) -> Optional[str]:
        return self.resolve(record) or self.lookup(record.get("id"))

    def fallback_images(self) -> List[ListingImage]:
        return [
            ListingImage(id=listing_id, url=url, title=f"Listing {listing_id}")
            for listing_id, url in self.static_images.items()
        ]
