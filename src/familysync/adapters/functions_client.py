"""HTTP client for Supabase Edge Functions."""

from dataclasses import dataclass

import httpx

from familysync.services.functions import FunctionsClient


@dataclass
class HttpxFunctionsClient(FunctionsClient):
    """Invokes functions at `<base_url>/<name>` as the signed-in user."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 120.0

    @classmethod
    def create(
        cls, base_url: str, api_key: str, timeout: float = 120.0
    ) -> "HttpxFunctionsClient":
        """Create a functions client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def invoke(
        self, name: str, body: dict[str, object], access_token: str
    ) -> str:
        """POST a JSON body and return the response text.

        Error statuses with a body are returned as-is so the caller can read
        the function's `error` field.
        """
        response = await self.http_client.post(
            f"{self.base_url}/{name}",
            json=body,
            headers={
                "Authorization": f"Bearer {access_token}",
                "apikey": self.api_key,
            },
            timeout=self.timeout,
        )
        if response.is_error and not response.text:
            response.raise_for_status()
        return response.text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
