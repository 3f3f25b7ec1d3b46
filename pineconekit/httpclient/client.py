from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from .config import HttpClientSettings
from .errors import HttpRequestError

log = logging.getLogger("pineconekit.http")


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpClient:
    """
    General-purpose async REST client on top of httpx.

    Returns decoded response bodies (JSON, text, or None when empty) and raises
    HttpRequestError for non-2xx responses and transport failures.
    """

    def __init__(
        self,
        settings: HttpClientSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers: Dict[str, str] = dict(settings.headers)
        if settings.rest_json:
            headers["Content-Type"] = "application/json"
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            headers=headers,
            transport=transport,
        )

    @property
    def headers(self) -> httpx.Headers:
        return self._client.headers

    def set_custom_headers(self, custom_headers: Mapping[str, str]) -> None:
        self._client.headers.update(custom_headers)

    async def get(self, path: str, params: Any = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None) -> Any:
        return await self.request("POST", path, data=data)

    async def patch(self, path: str, data: Any = None) -> Any:
        return await self.request("PATCH", path, data=data)

    async def delete(self, path: str, params: Any = None, data: Any = None) -> Any:
        return await self.request("DELETE", path, data=data, params=params)

    async def request(self, method: str, path: str, data: Any = None, params: Any = None) -> Any:
        t0 = time.perf_counter()
        try:
            response = await self._client.request(method, path, json=data, params=params)
        except httpx.HTTPError as e:
            dur_ms = int((time.perf_counter() - t0) * 1000)
            log.warning("http.error method=%s path=%s dur_ms=%s err=%s", method, path, dur_ms, e)
            raise HttpRequestError(method, path, str(e) or type(e).__name__, cause=e) from e

        dur_ms = int((time.perf_counter() - t0) * 1000)
        log.debug("http.request method=%s path=%s status=%s dur_ms=%s", method, path, response.status_code, dur_ms)

        if response.is_success:
            return _decode(response)

        raise HttpRequestError(
            method,
            path,
            f"status {response.status_code}",
            status_code=response.status_code,
            body=_decode(response),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
