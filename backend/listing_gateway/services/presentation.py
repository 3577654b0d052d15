from typing import Iterable, List, Optional

from listing_gateway.schemas.listing import ExchangeRate, Listing, ListingCard
from .pricing import format_price


def filter_listings(listings: Iterable[Listing], term: Optional[str]) -> List[Listing]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(listings)
    return [
        listing
        for listing in listings
        if needle in listing.name.lower() or needle in listing.description.lower()
    ]


def build_cards(
    listings: Iterable[Listing],
    rate: ExchangeRate,
    currency: str,
    term: Optional[str] = None,
    placeholder_image_url: str = "https://via.placeholder.com/300",
) -> List[ListingCard]:
    return [
        ListingCard(
            id=listing.id,
            name=listing.name,
            image_url=listing.image_url or placeholder_image_url,
            price=format_price(listing.price, rate, currency),
            currency=currency.upper(),
        )
        for listing in filter_listings(listings, term)
    ]
