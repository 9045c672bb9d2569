"""
Background Image Providers

Query functions for the external random-image sources. Each returns a single
image URL or raises.
"""
import logging
import posixpath
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from config import (
    MIN_ASPECT_RATIO,
    MIN_IMAGE_HEIGHT,
    MIN_IMAGE_WIDTH,
    REDDIT_API_URL,
    REDDIT_BATCH_SIZE,
    REDDIT_IMAGE_DOMAINS,
    UNSPLASH_RANDOM_URL,
)
from managers.sysconfig import get_config
from utils.http_fetch import fetch_timeout
from utils.httpcache import cache
from utils.random_choice import choose_random


class ProviderError(Exception):
    """Base class for background provider failures"""


class ProviderConfigError(ProviderError):
    """Provider cannot be used with the current configuration"""


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-200 status"""

    def __init__(self, provider: str, status: int, detail: str):
        self.provider = provider
        self.status = status
        self.detail = detail
        super().__init__(f"{provider} error: HTTP {status}: {detail}")


def _basename(value: str) -> str:
    # Same result as Node's path.basename: trailing slashes are ignored
    return posixpath.basename(value.rstrip("/"))


def reddit_listing_url(subreddits: str) -> str:
    """Build the listing URL for a comma separated subreddit list"""
    names = re.split(r"\s*,\s*", subreddits.strip())
    combined = _basename("+".join(names))
    return f"{REDDIT_API_URL}/r/{combined}/.json?limit={REDDIT_BATCH_SIZE}"


def _has_landscape_preview(post: Dict[str, Any]) -> bool:
    images = (post.get("preview") or {}).get("images") or []
    source = images[0].get("source") if images else None
    if not source:
        return False
    width = source.get("width") or 0
    height = source.get("height") or 0
    return height > MIN_IMAGE_HEIGHT and width > MIN_IMAGE_WIDTH and width / height > MIN_ASPECT_RATIO


def filter_reddit_posts(children: List[Dict[str, Any]]) -> List[str]:
    """
    Reduce a Reddit listing to the URLs of usable background images.

    Drops videos, stickied posts, posts without url or thumbnail, posts not
    hosted on a direct image host, and posts whose preview is too small or
    not landscape.

    Args:
        children: The listing's data.children entries

    Returns:
        Image URLs in listing order
    """
    urls = []
    for child in children:
        post = child.get("data") or {}
        if post.get("is_video") or post.get("stickied"):
            continue
        if not post.get("url") or not post.get("thumbnail"):
            continue
        if post.get("domain") not in REDDIT_IMAGE_DOMAINS:
            continue
        if not _has_landscape_preview(post):
            continue
        urls.append(post["url"])
    return urls


async def _fetch_reddit_posts(url: str, timeout: Optional[int]) -> List[str]:
    cached = cache(url)
    if cached is not None:
        logging.info(f"Reddit listing cache hit: {url}")
        return cached

    config = await get_config()
    response = await fetch_timeout(url, timeout=timeout, headers={"User-Agent": config.user_agent})
    if response.status != 200:
        raise ProviderHTTPError("reddit", response.status, response.text())

    data = response.json()
    urls = filter_reddit_posts(data["data"]["children"])
    logging.info(f"Reddit listing {url}: {len(urls)} usable images")
    return cache(url, urls)


async def query_bg_img_url_reddit(subreddits: str, timeout: Optional[int] = None) -> Optional[str]:
    """
    Pick a random landscape image from the given subreddits.

    Args:
        subreddits: Comma separated subreddit names
        timeout: Request timeout in milliseconds

    Returns:
        Image URL, or None if no post passed the filter
    """
    url = reddit_listing_url(subreddits or "")
    return choose_random(await _fetch_reddit_posts(url, timeout))


async def query_bg_img_url_unsplash(search_term: Optional[str], timeout: Optional[int] = None) -> str:
    """
    Fetch a random landscape photo from Unsplash.

    Args:
        search_term: Free text query
        timeout: Request timeout in milliseconds

    Returns:
        Full resolution image URL

    Raises:
        ProviderConfigError: If no API key is configured
        ProviderHTTPError: If Unsplash does not answer with HTTP 200
    """
    api_key = (await get_config()).unsplash_api_key
    if not api_key:
        raise ProviderConfigError("unsplash error: no api key given")

    search = urlencode({
        "client_id": api_key,
        "orientation": "landscape",
        "query": search_term or "",
    })
    response = await fetch_timeout(f"{UNSPLASH_RANDOM_URL}?{search}", timeout=timeout)
    if response.status == 200:
        return response.json()["urls"]["full"]
    raise ProviderHTTPError("unsplash", response.status, response.text())
