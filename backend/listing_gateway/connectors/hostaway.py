import json
import logging
from typing import Any

import httpx

from listing_gateway.core.errors import MalformedUpstreamPayload, UpstreamUnavailable
from .base import BaseConnector

logger = logging.getLogger(__name__)


def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body, unwrapping providers that send JSON inside a JSON string."""
    try:
        data = response.json()
        if isinstance(data, str):
            data = json.loads(data)
    except (ValueError, RecursionError) as exc:
        raise MalformedUpstreamPayload(f"Undecodable body from {response.request.url}") from exc
    return data


class HostawayConnector(BaseConnector):
    name = "hostaway"

    def __init__(self, client: httpx.AsyncClient, base_url: str, auth_token: str) -> None:
        self.client = client
        self.base_url = base_url
        self.auth_token = auth_token

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": self.auth_token, "Content-Type": "application/json"}

    async def fetch_payload(self, what: str = "listings") -> Any:
        logger.debug("[hostaway] fetching %s from %s", what, self.base_url)
        try:
            response = await self.client.get(self.base_url, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("%s fetch error: %s", what.capitalize(), exc)
            raise UpstreamUnavailable(what, str(exc)) from exc
        return decode_body(response)
