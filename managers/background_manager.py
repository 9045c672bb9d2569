"""
Background Resolution Manager

Turns a user's background configuration into a render configuration:
picks the image source for the selected background, resolves it
concurrently with the particles profile and decides how long the client
may keep reusing the image.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Dict, Optional, Union

from config import BACKGROUND_UPLOAD_PREFIX, BG_IMG_COOKIE
from managers.background_providers import query_bg_img_url_reddit, query_bg_img_url_unsplash
from managers.particles_manager import get_particles_config
from models.render_models import FailedImage, FreshImage, RenderConfig, ResolvedImage, ReusedImage
from models.request_models import BackgroundConfig, BackgroundMode, Provider, StaticSource, UserConfig
from utils.datetime_utils import NEVER_EXPIRES, epoch, epoch_to_datetime

# A provider lookup still to be awaited, or a URL known up front
ImageJob = Union[Awaitable[Optional[str]], str]


class NoSelectedBackgroundError(ValueError):
    """User configuration has no background marked as selected"""


def _create_image_job(bg_cfg: BackgroundConfig, timeout: Optional[int]) -> Optional[ImageJob]:
    """Pick the image source for the selected background, None if it has none"""
    if bg_cfg.background == BackgroundMode.RANDOM:
        random_image = bg_cfg.random_image
        if random_image is None:
            logging.warning("random background selected without random_image settings")
            return None
        if random_image.provider == Provider.UNSPLASH:
            return query_bg_img_url_unsplash(random_image.unsplash_query, timeout)
        if random_image.provider == Provider.REDDIT:
            return query_bg_img_url_reddit(random_image.subreddits, timeout)
        logging.warning(f"unknown background image provider: {random_image.provider}")
        return None

    if bg_cfg.background == BackgroundMode.STATIC:
        static_image = bg_cfg.static_image
        if static_image is None:
            logging.warning("static background selected without static_image settings")
            return None
        if static_image.source == StaticSource.UPLOAD:
            if not static_image.upload_url:
                logging.warning("static upload background selected without upload_url")
                return None
            return BACKGROUND_UPLOAD_PREFIX + static_image.upload_url
        if static_image.source == StaticSource.WEB:
            return static_image.web_url or None
        logging.warning(f"unknown background static image source: {static_image.source}")
        return None

    return None


def _expires_at(bg_cfg: BackgroundConfig) -> Optional[int]:
    duration = bg_cfg.random_image.duration if bg_cfg.random_image else None
    if duration and duration > 0:
        return epoch() + duration
    return None


async def _resolve_image(job: Optional[ImageJob], bg_cfg: BackgroundConfig) -> Optional[ResolvedImage]:
    if job is None:
        return None
    try:
        url = await job if inspect.isawaitable(job) else job
    except Exception as e:
        logging.error(f"Fetch random bg image error: {e}")
        return FailedImage()
    if not url:
        logging.warning(f"No background image candidate for mode {bg_cfg.background}")
        return FailedImage()
    return FreshImage(url=url, expires_at=_expires_at(bg_cfg))


async def _reuse_image(url: str) -> ResolvedImage:
    return ReusedImage(url=url)


async def _resolve_particles(profile_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not profile_id:
        return None
    try:
        return await get_particles_config(profile_id)
    except Exception as e:
        logging.error(f"Failed to load particles profile {profile_id}: {e}")
        return None


async def generate_current_bg_config(
    user_config: UserConfig,
    current_bg_img_url: Optional[str] = None,
    timeout: Optional[int] = None,
) -> RenderConfig:
    """
    Resolve the render configuration for the user's selected background.

    Args:
        user_config: Saved user configuration
        current_bg_img_url: Image URL from a still valid expiry marker. When
            given, no provider is queried and the URL is reused as is.
        timeout: Provider request timeout in milliseconds

    Returns:
        RenderConfig. Image failures are reported as FailedImage, never raised.

    Raises:
        NoSelectedBackgroundError: If no background is selected
    """
    bg_cfg = user_config.selected_background()
    if bg_cfg is None:
        raise NoSelectedBackgroundError("no background selected")

    particles_task = asyncio.create_task(_resolve_particles(bg_cfg.particles))

    if current_bg_img_url:
        image_task = asyncio.create_task(_reuse_image(current_bg_img_url))
    else:
        image_task = asyncio.create_task(_resolve_image(_create_image_job(bg_cfg, timeout), bg_cfg))

    image, particles = await asyncio.gather(image_task, particles_task)

    return RenderConfig(
        image=image,
        triangles=bg_cfg.background == BackgroundMode.TRIANGLES,
        particles=particles,
        blur=bg_cfg.blur,
        dots=bg_cfg.dots,
    )


def set_bg_img_cookie(response, bg_img: Optional[ResolvedImage]) -> bool:
    """
    Persist the expiry marker for a freshly resolved image.

    Failed and reused images leave the marker untouched. A fresh image
    without expiry is pinned until year 9999.

    Args:
        response: Response exposing Starlette's set_cookie()
        bg_img: Image from the render configuration

    Returns:
        True if a cookie was written
    """
    if not isinstance(bg_img, FreshImage):
        return False

    if bg_img.expires_at is None:
        expires = NEVER_EXPIRES
    else:
        expires = epoch_to_datetime(bg_img.expires_at)

    response.set_cookie(BG_IMG_COOKIE, bg_img.url, path="/", expires=expires)
    logging.debug(f"Set {BG_IMG_COOKIE} cookie for {bg_img.url} (expires {expires.isoformat()})")
    return True


def clear_bg_img_cookie(response) -> None:
    """Drop the expiry marker so the next request resolves a new image"""
    response.delete_cookie(BG_IMG_COOKIE, path="/")
