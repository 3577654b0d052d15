from pathlib import Path
from types import MappingProxyType

import httpx
import pytest
from fastapi.testclient import TestClient

from listing_gateway import main
from listing_gateway.api.deps import get_currency_converter, get_repository
from listing_gateway.connectors.hostaway import HostawayConnector
from listing_gateway.main import app
from listing_gateway.services.currency import CurrencyConverter
from listing_gateway.services.image_resolver import ImageResolver
from listing_gateway.services.repository import ListingRepository

FIXTURES = Path(__file__).parent / "fixtures"
UPSTREAM_URL = "https://upstream.example.com/listings"
QUOTE_URL = "https://rates.example.com/latest/USD"
TABLE = MappingProxyType({"305069": "https://static.example.com/305069.jpg"})


def _read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def _client(listings_handler, rates_handler=None) -> TestClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == QUOTE_URL:
            if rates_handler is None:
                return httpx.Response(200, json={"conversion_rates": {"PKR": 280.0}})
            return rates_handler(request)
        return listings_handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    repository = ListingRepository(HostawayConnector(http, UPSTREAM_URL, "token"), ImageResolver(TABLE))
    converter = CurrencyConverter(http, QUOTE_URL, fallback_rate=278.41)
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_currency_converter] = lambda: converter
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    app.dependency_overrides.clear()


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text=_read_fixture("hostaway_listings.json"))


def _down(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def test_health():
    client = _client(_ok)
    assert client.get("/health").json() == {"status": "ok"}


def test_list_listings_uses_camel_case_keys():
    client = _client(_ok)
    response = client.get("/api/listings")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 5
    assert body[0] == {
        "id": "305069",
        "name": "Villa A",
        "description": "No description available",
        "address": "Address not provided",
        "household": "No household information available",
        "price": "$120",
        "houseRules": "No specific house rules",
        "imageUrl": "https://static.example.com/305069.jpg",
    }


def test_get_listing_by_id():
    client = _client(_ok)
    response = client.get("/api/listings/400002")
    assert response.status_code == 200
    assert response.json()["name"] == "Garden Cottage"


def test_get_listing_not_found():
    client = _client(_ok)
    response = client.get("/api/listings/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Listing not found", "message": "No listing found with ID: nope"}


def test_upstream_down_is_reported():
    client = _client(_down)
    response = client.get("/api/listings")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch listings"


def test_images_fall_back_to_table_on_error_envelope():
    client = _client(lambda request: httpx.Response(200, json={"status": "error"}))
    response = client.get("/images")
    assert response.status_code == 200
    assert response.json() == [
        {"id": "305069", "url": "https://static.example.com/305069.jpg", "title": "Listing 305069"}
    ]


def test_images_upstream_down_is_reported():
    client = _client(_down)
    response = client.get("/images")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch images"


def test_exchange_rate_falls_back():
    client = _client(_ok, rates_handler=lambda request: httpx.Response(500))
    body = client.get("/api/exchange-rate").json()
    assert body["rate"] == 278.41
    assert body["source"] == "fallback"


def test_listing_cards_filter_and_convert():
    client = _client(_ok)
    response = client.get("/api/listing-cards", params={"q": "cabin"})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["rate"]["rate"] == 280.0
    assert body["items"][0]["price"] == "PKR 56000"
    assert body["items"][0]["imageUrl"] == "https://cdn.example.com/cabin-thumb.jpg"


def test_listing_cards_rejects_unknown_currency():
    client = _client(_ok)
    response = client.get("/api/listing-cards", params={"currency": "EUR"})
    assert response.status_code == 400


def test_list_listings_refetches_on_every_request():
    payloads = [
        _read_fixture("hostaway_listings.json"),
        '{"status": "success", "result": [{"id": 9, "name": "Fresh Listing"}]}',
    ]
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, text=payloads[min(len(calls), len(payloads)) - 1])

    client = _client(handler)
    first = client.get("/api/listings").json()
    second = client.get("/api/listings").json()

    assert calls == [UPSTREAM_URL, UPSTREAM_URL]
    assert len(first) == 5
    assert [listing["name"] for listing in second] == ["Fresh Listing"]


def test_startup_survives_failed_preload(monkeypatch):
    attempts = []

    async def failing_refresh(self):
        attempts.append(self)
        raise httpx.InvalidURL("bad upstream url")

    monkeypatch.setattr(main.settings, "preload_listings", True)
    monkeypatch.setattr(ListingRepository, "refresh", failing_refresh)

    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "ok"}
    assert len(attempts) == 1
