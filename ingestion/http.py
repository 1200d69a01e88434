"""
Shared HTTP plumbing for the FIO and ledger adapters.

Translates HTTP outcomes into the typed exceptions from core.exceptions:

    404           -> NotFoundError
    409           -> RateLimitedError
    other >= 400  -> TransportError
    httpx failure -> TransportError
"""

import httpx
import logging
from typing import Any, Optional

from core.exceptions import NotFoundError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)


async def request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    json: Optional[Any] = None,
    display_url: Optional[str] = None
) -> httpx.Response:
    """
    Perform request and raise typed error on failure.

    Args:
        client: HTTP client
        method: HTTP method
        url: Request URL
        json: JSON body
        display_url: URL to put into logs and error context (e.g. with token redacted)

    Returns:
        HTTP response with a successful status
    """
    shown = display_url or url
    logger.debug(f"{method} {shown}")

    try:
        if json is None:
            response = await client.request(method, url)
        else:
            response = await client.request(method, url, json=json)
    except httpx.HTTPError as e:
        raise TransportError(
            f"{method} {shown} failed",
            context={"method": method, "url": shown},
            original_exception=e
        )

    status_code = response.status_code
    context = {"method": method, "url": shown, "status_code": status_code}

    if status_code == 404:
        raise NotFoundError(f"Resource not found: {shown}", context=context)

    if status_code == 409:
        raise RateLimitedError(f"Request too early: {shown}", context=context)

    if status_code >= 400:
        context["response_body"] = response.text[:500]
        raise TransportError(
            f"{method} {shown} returned {status_code}",
            context=context
        )

    return response
