"""Shared plumbing for providers reached over plain HTTP."""

from __future__ import annotations

from typing import Any

import httpx

from ..errors import ProviderError
from . import ProviderAdapter

_DEFAULT_TIMEOUT = httpx.Timeout(connect=10.0, read=30.0, write=30.0, pool=10.0)


class HTTPProviderAdapter(ProviderAdapter):
    """Provider that POSTs to a JSON endpoint.

    An ``httpx.AsyncClient`` may be injected (tests use a mock transport);
    otherwise a short-lived client is opened per request.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def _post_json(self, url: str, **kwargs: Any) -> Any:
        if self._client is not None:
            response = await self._client.post(url, **kwargs)
        else:
            async with httpx.AsyncClient(timeout=_DEFAULT_TIMEOUT) as client:
                response = await client.post(url, **kwargs)

        if response.is_error:
            raise ProviderError(
                self.name, f"HTTP {response.status_code}: {response.text[:100]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(self.name, f"некорректный JSON: {e}") from e
