from fastapi import Request

from listing_gateway.core.config import Settings, get_settings
from listing_gateway.services.currency import CurrencyConverter
from listing_gateway.services.repository import ListingRepository


def get_repository(request: Request) -> ListingRepository:
    return request.app.state.repository


def get_currency_converter(request: Request) -> CurrencyConverter:
    return request.app.state.currency


def get_app_settings() -> Settings:
    return get_settings()
