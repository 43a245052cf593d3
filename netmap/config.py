from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional
import os


CANVAS_WIDTH = 100.0
CANVAS_HEIGHT = 100.0

ZOOM_MIN = 0.2
ZOOM_MAX = 5.0
ZOOM_STEP = 1.2

# Model units; multiplied by zoom at hit-test time.
HIT_RADIUS = 4.0

# Fractions of canvas height.
ROOT_BAND = 0.20
DEPTH_BAND = 0.20

REFRESH_MS = 5000


@dataclass(frozen=True)
class ViewConfig:
    canvas_width: float = CANVAS_WIDTH
    canvas_height: float = CANVAS_HEIGHT
    zoom_min: float = ZOOM_MIN
    zoom_max: float = ZOOM_MAX
    zoom_step: float = ZOOM_STEP
    hit_radius: float = HIT_RADIUS
    root_band: float = ROOT_BAND
    depth_band: float = DEPTH_BAND
    refresh_ms: int = REFRESH_MS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ViewConfig":
        """Defaults overridden by NETMAP_* environment variables.

        Unparseable or non-positive values are ignored.
        """
        env = os.environ if environ is None else environ
        cfg = cls()
        overrides = {}
        for key, field_name, conv in (
            ("NETMAP_HIT_RADIUS", "hit_radius", float),
            ("NETMAP_ZOOM_STEP", "zoom_step", float),
            ("NETMAP_REFRESH_MS", "refresh_ms", int),
        ):
            value = _parse_positive(env.get(key, ""), conv)
            if value is not None:
                overrides[field_name] = value
        # A step of exactly 1.0 would make zoom keys dead.
        if overrides.get("zoom_step") == 1.0:
            overrides.pop("zoom_step")
        return replace(cfg, **overrides) if overrides else cfg


def _parse_positive(raw: str, conv: Callable[[str], float]) -> Optional[float]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = conv(raw)
    except ValueError:
        return None
    return value if value > 0 else None
