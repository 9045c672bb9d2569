"""
Render Models

Result types produced by the background resolution cycle.

A resolved image is one of three variants:
    FreshImage   - resolved this cycle, carries an expiry (None = never)
    ReusedImage  - taken from the client's expiry marker, expiry untouched
    FailedImage  - resolution failed, nothing to show
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class FreshImage:
    url: str
    expires_at: Optional[int] = None  # epoch seconds

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "expiresAt": self.expires_at}


@dataclass(frozen=True)
class ReusedImage:
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class FailedImage:
    def to_dict(self) -> Dict[str, Any]:
        return {"error": True}


ResolvedImage = Union[FreshImage, ReusedImage, FailedImage]


@dataclass
class RenderConfig:
    image: Optional[ResolvedImage]
    triangles: bool
    particles: Optional[Dict[str, Any]]
    blur: Optional[float] = None
    dots: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image.to_dict() if self.image else None,
            "triangles": self.triangles,
            "particles": self.particles,
            "blur": self.blur,
            "dots": self.dots,
        }
