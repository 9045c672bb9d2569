"""
API Request Models

Pydantic models for the user's saved background configuration.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class BackgroundMode(str, Enum):
    RANDOM = "random"
    STATIC = "static"
    TRIANGLES = "triangles"


class Provider(str, Enum):
    UNSPLASH = "unsplash"
    REDDIT = "reddit"


class StaticSource(str, Enum):
    UPLOAD = "upload"
    WEB = "web"


class RandomImageConfig(BaseModel):
    provider: Provider = Provider.UNSPLASH
    unsplash_query: Optional[str] = None
    subreddits: Optional[str] = None  # comma separated
    duration: Optional[int] = None  # seconds, None/0 = never expires


class StaticImageConfig(BaseModel):
    source: StaticSource = StaticSource.UPLOAD
    upload_url: Optional[str] = None
    web_url: Optional[str] = None


class BackgroundConfig(BaseModel):
    # Modes other than BackgroundMode values are passed through without an image
    background: str = BackgroundMode.TRIANGLES.value
    selected: bool = False
    blur: Optional[float] = None
    dots: Optional[bool] = None
    particles: Optional[str] = None  # particles profile id
    random_image: Optional[RandomImageConfig] = None
    static_image: Optional[StaticImageConfig] = None


class UserConfig(BaseModel):
    backgrounds: List[BackgroundConfig] = []

    def selected_background(self) -> Optional[BackgroundConfig]:
        """Return the selected background, first one wins if several are marked"""
        return next((bg for bg in self.backgrounds if bg.selected), None)
