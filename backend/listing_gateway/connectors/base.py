from abc import ABC, abstractmethod
from typing import Any


class BaseConnector(ABC):
    name: str

    @abstractmethod
    async def fetch_payload(self, what: str = "listings") -> Any:  # pragma: no cover - interface
        """Fetch the raw listings envelope from the provider."""
