from __future__ import annotations

import asyncio
import logging

import httpx

from feedboard.core.config import settings
from feedboard.core.errors import FetchFailed

log = logging.getLogger(__name__)


async def fetch_text(
    url: str,
    *,
    source: str,
    params: dict | None = None,
    accept: str = "*/*",
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> str:
    """
    GET ``url`` and return the body text.

    The whole request is bounded by ``timeout`` seconds. When no client is
    given, one is opened for this request only and closed on every exit path,
    including cancellation on timeout.
    """
    timeout = settings.fetch_timeout_seconds if timeout is None else timeout
    headers = {"User-Agent": settings.user_agent, "Accept": accept}

    if client is None:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
            return await _get(own_client, url, params, headers, source, timeout)
    return await _get(client, url, params, headers, source, timeout)


async def _get(
    client: httpx.AsyncClient,
    url: str,
    params: dict | None,
    headers: dict,
    source: str,
    timeout: float,
) -> str:
    try:
        response = await asyncio.wait_for(
            client.get(url, params=params, headers=headers), timeout
        )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        log.error("%s fetch timed out after %ss: %s", source, timeout, url)
        raise FetchFailed(source, f"request timed out after {timeout:g}s") from exc
    except httpx.HTTPError as exc:
        log.error("%s fetch failed: %s", source, exc)
        raise FetchFailed(source, f"request failed: {exc}") from exc

    if not response.is_success:
        log.error("%s fetch returned %s: %s", source, response.status_code, response.url)
        raise FetchFailed(
            source,
            f"upstream returned {response.status_code}",
            status_code=response.status_code,
        )
    return response.text
