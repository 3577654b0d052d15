from .listing import (
    ErrorResponse,
    ExchangeRate,
    Listing,
    ListingCard,
    ListingCardsResponse,
    ListingImage,
)

__all__ = [
    "Listing",
    "ListingImage",
    "ListingCard",
    "ListingCardsResponse",
    "ExchangeRate",
    "ErrorResponse",
]
