from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from listing_gateway.api.deps import get_app_settings, get_currency_converter, get_repository
from listing_gateway.core.config import Settings
from listing_gateway.schemas.listing import (
    ErrorResponse,
    ExchangeRate,
    Listing,
    ListingCardsResponse,
    ListingImage,
)
from listing_gateway.services.currency import CurrencyConverter
from listing_gateway.services.presentation import build_cards
from listing_gateway.services.repository import ListingRepository

router = APIRouter(tags=["listings"])


@router.get("/api/listings", response_model=List[Listing])
async def list_listings(repository: ListingRepository = Depends(get_repository)) -> List[Listing]:
    return await repository.refresh()


@router.get(
    "/api/listings/{listing_id}",
    response_model=Listing,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_listing(listing_id: str, repository: ListingRepository = Depends(get_repository)):
    listing = await repository.get_by_id(listing_id)
    if listing is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Listing not found", "message": f"No listing found with ID: {listing_id}"},
        )
    return listing


@router.get("/images", response_model=List[ListingImage])
async def list_images(repository: ListingRepository = Depends(get_repository)) -> List[ListingImage]:
    return await repository.get_images()


@router.get("/api/exchange-rate", response_model=ExchangeRate)
async def exchange_rate(converter: CurrencyConverter = Depends(get_currency_converter)) -> ExchangeRate:
    return await converter.refresh_rate()


@router.get("/api/listing-cards", response_model=ListingCardsResponse)
async def listing_cards(
    q: Optional[str] = Query(None, description="Free-text filter on name and description"),
    currency: Optional[str] = Query(None, description="Display currency, base or target"),
    repository: ListingRepository = Depends(get_repository),
    converter: CurrencyConverter = Depends(get_currency_converter),
    settings: Settings = Depends(get_app_settings),
) -> ListingCardsResponse:
    rate = await converter.refresh_rate()
    display_currency = currency or rate.target
    if display_currency.upper() not in {rate.base.upper(), rate.target.upper()}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported currency {display_currency}")

    listings = await repository.refresh()
    cards = build_cards(listings, rate, display_currency, q, settings.placeholder_image_url)
    return ListingCardsResponse(items=cards, count=len(cards), rate=rate)
