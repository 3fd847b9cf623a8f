# openai_cost/api/transport.py
"""
Single authenticated GET against the costs API, sync and async.

The transport knows nothing about costs: it returns the status code and the
raw body of any response that completed at protocol level, and turns
``httpx`` request failures into ``OpenAICostError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import httpx

from ..config import API_BASE_URL, HTTP_CONNECT_TIMEOUT, HTTP_TIMEOUT
from ..models.errors import OpenAICostError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299


def default_timeout() -> httpx.Timeout:
    return httpx.Timeout(HTTP_TIMEOUT, connect=HTTP_CONNECT_TIMEOUT)


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }


def _translate(ex: Exception) -> OpenAICostError:
    # UnsupportedProtocol is a TransportError subclass but means a bad URL.
    if isinstance(ex, (httpx.UnsupportedProtocol, httpx.InvalidURL)):
        return OpenAICostError.invalid_request_construction(str(ex))
    return OpenAICostError.transport_failure(f"{type(ex).__name__}: {ex}")


class HttpTransport:
    """Blocking transport on top of ``httpx.Client``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = API_BASE_URL,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        try:
            self._client = httpx.Client(
                base_url=base_url,
                headers=_headers(api_key),
                timeout=timeout or default_timeout(),
                transport=transport,
            )
        except httpx.InvalidURL as ex:
            raise _translate(ex) from ex

    def get(self, path: str, params: Sequence[Tuple[str, str]]) -> RawResponse:
        _LOGGER.debug("GET %s params=%s", path, list(params))
        try:
            resp = self._client.get(path, params=list(params))
        except (httpx.RequestError, httpx.InvalidURL) as ex:
            raise _translate(ex) from ex
        _LOGGER.debug("GET %s -> HTTP %s (%d bytes)", path, resp.status_code, len(resp.content))
        return RawResponse(resp.status_code, resp.content)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncHttpTransport:
    """Same contract as :class:`HttpTransport` on ``httpx.AsyncClient``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = API_BASE_URL,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        try:
            self._client = httpx.AsyncClient(
                base_url=base_url,
                headers=_headers(api_key),
                timeout=timeout or default_timeout(),
                transport=transport,
            )
        except httpx.InvalidURL as ex:
            raise _translate(ex) from ex

    async def get(self, path: str, params: Sequence[Tuple[str, str]]) -> RawResponse:
        _LOGGER.debug("GET %s params=%s", path, list(params))
        try:
            resp = await self._client.get(path, params=list(params))
        except (httpx.RequestError, httpx.InvalidURL) as ex:
            raise _translate(ex) from ex
        _LOGGER.debug("GET %s -> HTTP %s (%d bytes)", path, resp.status_code, len(resp.content))
        return RawResponse(resp.status_code, resp.content)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["RawResponse", "HttpTransport", "AsyncHttpTransport", "default_timeout"]
