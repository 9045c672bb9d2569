"""
Particles Manager

Produces particle-overlay render descriptors for a named profile.
Built-in presets can be overridden or extended by JSON files in PARTICLES_DIR.
"""
import copy
import json
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict

from config import PARTICLES_DIR


class ParticlesConfigError(Exception):
    """Unknown or unreadable particles profile"""


def _preset(number: int, shape: str, speed: float, size: float, move_direction: str = "none",
            links: bool = False) -> Dict[str, Any]:
    return {
        "fpsLimit": 60,
        "particles": {
            "number": {"value": number, "density": {"enable": True}},
            "shape": {"type": shape},
            "size": {"value": size},
            "opacity": {"value": 0.6},
            "move": {"enable": True, "speed": speed, "direction": move_direction},
            "links": {"enable": links, "distance": 150, "opacity": 0.4},
        },
        "detectRetina": True,
    }


PARTICLES_PRESETS: Dict[str, Dict[str, Any]] = {
    "snow": _preset(120, "circle", 1.5, 3, move_direction="bottom"),
    "stars": _preset(160, "star", 0.2, 1.5),
    "bubbles": _preset(40, "circle", 1.0, 12, move_direction="top"),
    "links": _preset(80, "circle", 2.0, 2, links=True),
}


async def get_particles_config(profile_id: str) -> Dict[str, Any]:
    """
    Resolve a particles profile to its render descriptor.

    Args:
        profile_id: Profile name from the user's background configuration

    Returns:
        Descriptor dict, a fresh copy on every call

    Raises:
        ParticlesConfigError: If the profile is unknown or its file is invalid
    """
    name = posixpath.basename(profile_id or "")
    if not name:
        raise ParticlesConfigError(f"invalid particles profile: {profile_id!r}")

    profile_path = Path(PARTICLES_DIR) / f"{name}.json"
    if profile_path.is_file():
        try:
            with open(profile_path, "r") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ParticlesConfigError(f"failed to load particles profile {name}: {e}")

    if name in PARTICLES_PRESETS:
        return copy.deepcopy(PARTICLES_PRESETS[name])

    logging.debug(f"Particles profile {name} not found in {PARTICLES_DIR}")
    raise ParticlesConfigError(f"unknown particles profile: {name}")
