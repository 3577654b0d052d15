from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    """Canonical listing built from one upstream record.

    ``id`` is synthesized from the clock when upstream omits it; such ids are
    unique within one normalization pass but change on every reload.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str
    address: str
    household: str
    price: str
    house_rules: str = Field(alias="houseRules")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class ListingImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str
    title: str


class ExchangeRate(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base: str
    target: str
    rate: float
    source: Literal["live", "fallback"]
    fetched_at: Optional[datetime] = Field(default=None, alias="fetchedAt")


class ListingCard(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    image_url: str = Field(alias="imageUrl")
    price: str
    currency: str


class ListingCardsResponse(BaseModel):
    items: List[ListingCard]
    count: int
    rate: ExchangeRate


class ErrorResponse(BaseModel):
    error: str
    message: str
