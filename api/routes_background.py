"""
Background Routes

Resolves the dashboard background and manages uploaded background images.
"""
import io
import logging
import posixpath
import re
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Cookie, File, HTTPException, Response, UploadFile
from PIL import Image, UnidentifiedImageError

from config import BG_IMG_COOKIE, UPLOAD_DIR
from managers.background_manager import (
    NoSelectedBackgroundError,
    clear_bg_img_cookie,
    generate_current_bg_config,
    set_bg_img_cookie,
)
from managers.sysconfig import get_config
from models.request_models import UserConfig

ALLOWED_UPLOAD_FORMATS = {"JPEG": ".jpg", "PNG": ".png", "WEBP": ".webp", "GIF": ".gif"}


def setup_background_routes(upload_dir: str = UPLOAD_DIR) -> APIRouter:
    """
    Setup background routes

    Args:
        upload_dir: Directory uploaded background images are stored in

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/background")

    @router.post("/current")
    async def current_background(
        user_config: UserConfig,
        response: Response,
        bgimg: Optional[str] = Cookie(default=None, alias=BG_IMG_COOKIE),
    ):
        """Resolve the render configuration for the selected background"""
        try:
            config = await get_config()
            render_config = await generate_current_bg_config(
                user_config,
                current_bg_img_url=bgimg,
                timeout=config.request_timeout_ms,
            )
        except NoSelectedBackgroundError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logging.error(f"Failed to resolve background: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        set_bg_img_cookie(response, render_config.image)
        return render_config.to_dict()

    @router.post("/reset")
    async def reset_background(response: Response):
        """Forget the current image so the next request resolves a new one"""
        clear_bg_img_cookie(response)
        return {"status": "success"}

    @router.post("/upload")
    async def upload_background(file: UploadFile = File(...)):
        """Store an uploaded background image"""
        image_data = await file.read()
        try:
            with Image.open(io.BytesIO(image_data)) as img:
                img.verify()
                image_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logging.warning(f"Rejected background upload {file.filename}: {e}")
            raise HTTPException(status_code=400, detail="Uploaded file is not a supported image")

        extension = ALLOWED_UPLOAD_FORMATS.get(image_format)
        if extension is None:
            raise HTTPException(status_code=400, detail=f"Unsupported image format: {image_format}")

        stem = re.sub(r"[^A-Za-z0-9_-]+", "-", Path(posixpath.basename(file.filename or "")).stem)
        stem = stem.strip("-") or "background"
        name = f"{uuid.uuid4().hex[:12]}_{stem}{extension}"
        try:
            target_dir = Path(upload_dir)
            target_dir.mkdir(parents=True, exist_ok=True)
            with open(target_dir / name, "wb") as f:
                f.write(image_data)
        except OSError as e:
            logging.error(f"Failed to store background upload: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to store background: {str(e)}")

        logging.info(f"Stored background upload {name} ({len(image_data)} bytes)")
        return {"upload_url": name}

    return router
