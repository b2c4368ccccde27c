from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


class HttpClient:
    def __init__(
        self,
        timeout_seconds: int,
        user_agent: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            headers={
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        timeout_seconds: Optional[float] = None,
    ) -> httpx.Response:
        """POST *payload* as JSON and return the raw response.

        Status handling is left to the caller so provider-specific error
        bodies (quota exhaustion, bad key) can be classified.  *timeout_seconds*
        overrides the client-wide timeout for this request only.
        """
        if self._client is None:
            raise RuntimeError("HttpClient must be used as an async context manager.")
        if timeout_seconds is None:
            return await self._client.post(url, json=payload, headers=headers)
        return await self._client.post(
            url,
            json=payload,
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
        )
