"""
HTTP fetch with timeout.

Thin aiohttp wrapper used by the background image providers. The response
body is read inside the session so callers get a plain object back.
"""
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp


class FetchError(Exception):
    """Network failure or timeout while fetching a URL"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"fetch {url} failed: {reason}")


@dataclass
class FetchResponse:
    url: str
    status: int
    body: str

    def text(self) -> str:
        return self.body

    def json(self) -> Any:
        return json.loads(self.body)


async def fetch_timeout(
    url: str,
    timeout: Optional[int] = None,
    omit_credentials: bool = True,
    headers: Optional[Dict[str, str]] = None,
) -> FetchResponse:
    """
    GET a URL with an upper bound on the whole request.

    Args:
        url: Absolute URL to fetch
        timeout: Timeout in milliseconds, None for no limit
        omit_credentials: Neither send nor store cookies
        headers: Extra request headers. No Referer is ever sent.

    Returns:
        FetchResponse with status and body text

    Raises:
        FetchError: On connection errors and timeouts
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout / 1000 if timeout else None)
    cookie_jar = aiohttp.DummyCookieJar() if omit_credentials else None
    request_headers = {k: v for k, v in (headers or {}).items() if k.lower() != "referer"}

    try:
        async with aiohttp.ClientSession(timeout=client_timeout, cookie_jar=cookie_jar) as session:
            async with session.get(url, headers=request_headers) as response:
                body = await response.text()
                logging.debug(f"GET {url} -> HTTP {response.status} ({len(body)} bytes)")
                return FetchResponse(url=url, status=response.status, body=body)
    except asyncio.TimeoutError:
        raise FetchError(url, f"timed out after {timeout}ms")
    except aiohttp.ClientError as e:
        raise FetchError(url, str(e))
