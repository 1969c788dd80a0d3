"""HTTP client for the remote hydration tips document."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DEFAULT_TIPS_URL = (
    "https://raw.githubusercontent.com/cheryl7114/mobile_CA3/main/"
    "data/hydration_tips.json"
)


class TipsClient(Protocol):
    """Interface for fetching the tips document."""

    async def fetch_tips_document(self) -> object:
        """Return the decoded JSON tips document."""


@dataclass
class HttpxTipsClient(TipsClient):
    """HTTPX-backed tips client."""

    url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls, url: str = DEFAULT_TIPS_URL, timeout_seconds: float = 15.0
    ) -> "HttpxTipsClient":
        """Create a tips client with a managed httpx session."""
        return cls(
            url=url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def fetch_tips_document(self) -> object:
        """GET the tips document, raising on non-2xx responses."""
        response = await self.http_client.get(self.url, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
