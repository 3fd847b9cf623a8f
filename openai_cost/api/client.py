# openai_cost/api/client.py
"""
Costs API client: one page at a time, or the whole listing.

Pagination is a generator. Each iteration issues exactly one request, and the
cursor for request N+1 is only read from decoded response N, so fetches are
strictly sequential. ``fetch_all`` drains the generator; any failure aborts
it and nothing accumulated so far is returned.
"""

from __future__ import annotations

import logging
import os
from typing import AsyncIterator, Iterator, List, Optional

import httpx

from ..config import ADMIN_KEY_ENV, API_BASE_URL, COSTS_ENDPOINT
from ..models.costs import CostBucket, CostResponse
from ..models.errors import OpenAICostError
from ..models.query import CostQueryParameters
from ..utils.trace import PageTrace
from .classifier import classify_error
from .decode import decode_cost_response
from .transport import AsyncHttpTransport, HttpTransport, RawResponse

_LOGGER = logging.getLogger(__name__)


# --------------------------------------------------------------------
# Shared per-page pipeline
# --------------------------------------------------------------------
def _require_api_key(api_key: Optional[str]) -> str:
    if api_key is None or not api_key.strip():
        raise OpenAICostError.missing_credential(ADMIN_KEY_ENV)
    return api_key


def _api_key_from_env() -> str:
    return _require_api_key(os.environ.get(ADMIN_KEY_ENV))


def _to_page(raw: RawResponse) -> CostResponse:
    if not raw.is_success:
        raise classify_error(raw.status_code, raw.content)
    return decode_cost_response(raw.content)


def _next_cursor(response: CostResponse, page_number: int) -> Optional[str]:
    if not response.has_more:
        return None
    if not response.next_page:
        _LOGGER.warning(
            "Page %d reports has_more=true without a next_page cursor; treating it as the last page",
            page_number,
        )
        return None
    return response.next_page


def _record_page(
    trace: Optional[PageTrace],
    page_number: int,
    cursor: Optional[str],
    response: CostResponse,
) -> None:
    _LOGGER.debug(
        "Fetched page %d (cursor=%s): %d buckets, has_more=%s, next_page=%s",
        page_number,
        cursor,
        len(response.data),
        response.has_more,
        response.next_page,
    )
    if trace is not None:
        trace.record(page_number, cursor, len(response.data), response.has_more, response.next_page)


def _reached_cap(page_number: int, max_pages: Optional[int], cursor: Optional[str]) -> bool:
    if max_pages is None or page_number < max_pages:
        return False
    if cursor:
        _LOGGER.info("Stopping after %d pages (max_pages); more data is available", page_number)
    return True


def _merge(pages: List[CostResponse]) -> CostResponse:
    buckets = tuple(bucket for page in pages for bucket in page.data)
    last = pages[-1]
    # Only a cap leaves a usable cursor behind; a natural end has none.
    leftover = last.next_page if last.has_more and last.next_page else None
    return CostResponse(object=last.object, data=buckets, has_more=leftover is not None, next_page=leftover)


# --------------------------------------------------------------------
# Sync client
# --------------------------------------------------------------------
class CostClient:
    """Blocking client for ``GET /organization/costs``.

    ``transport`` is an optional ``httpx`` transport (e.g. ``httpx.MockTransport``)
    handed to the underlying ``httpx.Client``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = API_BASE_URL,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.BaseTransport] = None,
        trace: Optional[PageTrace] = None,
    ) -> None:
        self._http = HttpTransport(
            _require_api_key(api_key),
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )
        self.trace = trace

    @classmethod
    def from_env(cls, **kwargs) -> "CostClient":
        return cls(_api_key_from_env(), **kwargs)

    def fetch_page(self, params: CostQueryParameters) -> CostResponse:
        return _to_page(self._http.get(COSTS_ENDPOINT, params.query_items()))

    def iter_pages(
        self, params: CostQueryParameters, max_pages: Optional[int] = None
    ) -> Iterator[CostResponse]:
        cursor = params.page
        page_number = 0
        while True:
            page_number += 1
            response = self.fetch_page(params.with_page(cursor))
            _record_page(self.trace, page_number, cursor, response)
            yield response

            cursor = _next_cursor(response, page_number)
            if cursor is None or _reached_cap(page_number, max_pages, cursor):
                return

    def collect_pages(
        self, params: CostQueryParameters, max_pages: Optional[int] = None
    ) -> CostResponse:
        """All pages merged into one response.

        ``has_more``/``next_page`` are only set when ``max_pages`` stopped the
        listing early; ``next_page`` then resumes where it left off.
        """
        return _merge(list(self.iter_pages(params, max_pages=max_pages)))

    def fetch_all(
        self, params: CostQueryParameters, max_pages: Optional[int] = None
    ) -> List[CostBucket]:
        return list(self.collect_pages(params, max_pages=max_pages).data)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CostClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


# --------------------------------------------------------------------
# Async client
# --------------------------------------------------------------------
class AsyncCostClient:
    """Async twin of :class:`CostClient`.

    Cancellation is honored at every await; ``asyncio.CancelledError`` is never
    turned into an ``OpenAICostError``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = API_BASE_URL,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        trace: Optional[PageTrace] = None,
    ) -> None:
        self._http = AsyncHttpTransport(
            _require_api_key(api_key),
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )
        self.trace = trace

    @classmethod
    def from_env(cls, **kwargs) -> "AsyncCostClient":
        return cls(_api_key_from_env(), **kwargs)

    async def fetch_page(self, params: CostQueryParameters) -> CostResponse:
        raw = await self._http.get(COSTS_ENDPOINT, params.query_items())
        return _to_page(raw)

    async def aiter_pages(
        self, params: CostQueryParameters, max_pages: Optional[int] = None
    ) -> AsyncIterator[CostResponse]:
        cursor = params.page
        page_number = 0
        while True:
            page_number += 1
            response = await self.fetch_page(params.with_page(cursor))
            _record_page(self.trace, page_number, cursor, response)
            yield response

            cursor = _next_cursor(response, page_number)
            if cursor is None or _reached_cap(page_number, max_pages, cursor):
                return

    async def collect_pages(
        self, params: CostQueryParameters, max_pages: Optional[int] = None
    ) -> CostResponse:
        return _merge([response async for response in self.aiter_pages(params, max_pages=max_pages)])

    async def fetch_all(
        self, params: CostQueryParameters, max_pages: Optional[int] = None
    ) -> List[CostBucket]:
        return list((await self.collect_pages(params, max_pages=max_pages)).data)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncCostClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = ["CostClient", "AsyncCostClient"]
