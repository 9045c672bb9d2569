import json
from urllib.parse import parse_qs, urlparse
from unittest.mock import AsyncMock, patch

import pytest

from managers.background_providers import (
    ProviderConfigError,
    ProviderHTTPError,
    filter_reddit_posts,
    query_bg_img_url_reddit,
    query_bg_img_url_unsplash,
    reddit_listing_url,
)
from utils.http_fetch import FetchError, FetchResponse


def make_post(url="https://i.imgur.com/a.jpg", domain="i.imgur.com", width=1920, height=1080, **extra):
    data = {
        "url": url,
        "domain": domain,
        "thumbnail": "https://b.thumbs.redditmedia.com/t.jpg",
        "is_video": False,
        "stickied": False,
        "preview": {"images": [{"source": {"width": width, "height": height}}]},
    }
    data.update(extra)
    return {"kind": "t3", "data": data}


def listing(*posts):
    return FetchResponse(
        url="https://api.reddit.com/r/x/.json?limit=100",
        status=200,
        body=json.dumps({"data": {"children": list(posts)}}),
    )


def test_listing_url_joins_and_trims_subreddits():
    url = reddit_listing_url("  EarthPorn , SkyPorn,CityPorn  ")
    assert url == "https://api.reddit.com/r/EarthPorn+SkyPorn+CityPorn/.json?limit=100"


def test_listing_url_strips_path_components():
    url = reddit_listing_url("../../api/v1/me")
    assert url == "https://api.reddit.com/r/me/.json?limit=100"


def test_filter_keeps_only_large_landscape_direct_images():
    posts = [
        make_post(url="https://i.imgur.com/good.jpg"),
        make_post(url="https://i.redd.it/good2.png", domain="i.redd.it", width=1200, height=900),
        make_post(url="https://v.redd.it/video", is_video=True),
        make_post(url="https://i.imgur.com/sticky.jpg", stickied=True),
        make_post(url="https://example.com/wrong.jpg", domain="example.com"),
        make_post(url="https://i.imgur.com/square.jpg", width=1100, height=1000),
        make_post(url="https://i.imgur.com/portrait.jpg", width=1080, height=1920),
        make_post(url="https://i.imgur.com/short.jpg", width=2000, height=800),
        make_post(url="https://i.imgur.com/narrow.jpg", width=1000, height=810),
        make_post(url="https://i.imgur.com/nothumb.jpg", thumbnail=""),
        make_post(url=""),
        make_post(url="https://i.imgur.com/nopreview.jpg", preview=None),
        make_post(url="https://i.imgur.com/emptypreview.jpg", preview={"images": []}),
    ]

    assert filter_reddit_posts(posts) == ["https://i.imgur.com/good.jpg", "https://i.redd.it/good2.png"]


def test_filter_empty_listing():
    assert filter_reddit_posts([]) == []


@pytest.mark.asyncio
async def test_reddit_returns_member_of_filtered_set(unsplash_config):
    response = listing(
        make_post(url="https://i.imgur.com/1.jpg"),
        make_post(url="https://i.imgur.com/2.jpg"),
        make_post(url="https://i.imgur.com/sticky.jpg", stickied=True),
    )
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)) as fetch:
        url = await query_bg_img_url_reddit("wallpapers", timeout=1500)

    assert url in ("https://i.imgur.com/1.jpg", "https://i.imgur.com/2.jpg")
    fetch.assert_awaited_once()
    assert fetch.await_args.args[0] == "https://api.reddit.com/r/wallpapers/.json?limit=100"
    assert fetch.await_args.kwargs["timeout"] == 1500
    assert fetch.await_args.kwargs["headers"] == {"User-Agent": "tests/1.0"}


@pytest.mark.asyncio
async def test_reddit_second_call_hits_cache(unsplash_config):
    response = listing(make_post(url="https://i.imgur.com/only.jpg"))
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)) as fetch:
        first = await query_bg_img_url_reddit("a, b")
        second = await query_bg_img_url_reddit("a,b")

    assert first == second == "https://i.imgur.com/only.jpg"
    assert fetch.await_count == 1


@pytest.mark.asyncio
async def test_reddit_caches_filtered_list(unsplash_config):
    from utils.httpcache import cache

    response = listing(
        make_post(url="https://i.imgur.com/keep.jpg"),
        make_post(url="https://v.redd.it/video", is_video=True),
    )
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)):
        await query_bg_img_url_reddit("pics")

    assert cache("https://api.reddit.com/r/pics/.json?limit=100") == ["https://i.imgur.com/keep.jpg"]


@pytest.mark.asyncio
async def test_reddit_no_candidate_returns_none(unsplash_config):
    response = listing(make_post(url="https://i.imgur.com/portrait.jpg", width=1080, height=1920))
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)) as fetch:
        assert await query_bg_img_url_reddit("pics") is None
        # empty result is cached too
        assert await query_bg_img_url_reddit("pics") is None
    assert fetch.await_count == 1


@pytest.mark.asyncio
async def test_reddit_http_error(unsplash_config):
    response = FetchResponse(url="u", status=429, body="Too Many Requests")
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)):
        with pytest.raises(ProviderHTTPError) as exc:
            await query_bg_img_url_reddit("pics")
    assert exc.value.status == 429


@pytest.mark.asyncio
async def test_unsplash_returns_full_url(unsplash_config):
    response = FetchResponse(url="u", status=200, body=json.dumps({"urls": {"full": "Y", "small": "s"}}))
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)) as fetch:
        url = await query_bg_img_url_unsplash("mountain lake", timeout=2000)

    assert url == "Y"
    requested = urlparse(fetch.await_args.args[0])
    assert requested.netloc == "api.unsplash.com"
    assert requested.path == "/photos/random"
    assert parse_qs(requested.query) == {
        "client_id": ["test-key"],
        "orientation": ["landscape"],
        "query": ["mountain lake"],
    }
    assert fetch.await_args.kwargs["timeout"] == 2000


@pytest.mark.asyncio
async def test_unsplash_non_200_surfaces_body(unsplash_config):
    response = FetchResponse(url="u", status=401, body="OAuth error: The access token is invalid")
    with patch("managers.background_providers.fetch_timeout", AsyncMock(return_value=response)):
        with pytest.raises(ProviderHTTPError) as exc:
            await query_bg_img_url_unsplash("sea")
    assert exc.value.detail == "OAuth error: The access token is invalid"
    assert "unsplash error" in str(exc.value)


@pytest.mark.asyncio
async def test_unsplash_without_key_fails_before_request():
    with patch("managers.background_providers.fetch_timeout", AsyncMock()) as fetch:
        with pytest.raises(ProviderConfigError):
            await query_bg_img_url_unsplash("sea")
    fetch.assert_not_called()


@pytest.mark.asyncio
async def test_fetch_errors_propagate(unsplash_config):
    error = FetchError("https://api.unsplash.com/photos/random", "timed out after 10ms")
    with patch("managers.background_providers.fetch_timeout", AsyncMock(side_effect=error)):
        with pytest.raises(FetchError):
            await query_bg_img_url_unsplash("sea", timeout=10)
