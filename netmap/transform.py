"""Coordinate transforms between model, view and screen space.

model:  fixed 0..100 x 0..100 space where node positions live
view:   model after zoom/pan, still in canvas units (what the renderer emits)
screen: host pixels or terminal cells inside a viewport rectangle

One affine transform is used for rendering, hit-testing and drag/pan
deltas. y grows downward in every space.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

MODEL_MIN = 0.0
MODEL_MAX = 100.0

Point = Tuple[float, float]


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_to_model(x: float, y: float) -> Point:
    return clamp(x, MODEL_MIN, MODEL_MAX), clamp(y, MODEL_MIN, MODEL_MAX)


def _at_least_one(v: float) -> float:
    # Zero-sized canvases/viewports would otherwise divide by zero.
    return v if v >= 1 else 1.0


@dataclass(frozen=True)
class Rect:
    """Viewport area in screen units."""

    x: float
    y: float
    width: float
    height: float

    def inner(self, margin: float = 1) -> "Rect":
        """Area inside a border of ``margin`` units on each side."""
        return Rect(
            self.x + margin,
            self.y + margin,
            max(0.0, self.width - 2 * margin),
            max(0.0, self.height - 2 * margin),
        )

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height


# ───────────────── model <-> view ─────────────────

def model_to_view(mx: float, my: float, zoom: float, pan: Point) -> Point:
    return (mx - pan[0]) * zoom, (my - pan[1]) * zoom


def view_to_model(vx: float, vy: float, zoom: float, pan: Point) -> Point:
    return vx / zoom + pan[0], vy / zoom + pan[1]


# ───────────────── view <-> screen ─────────────────

def view_to_screen(vx: float, vy: float, area: Rect, canvas: Point) -> Point:
    sx = _at_least_one(area.width) / _at_least_one(canvas[0])
    sy = _at_least_one(area.height) / _at_least_one(canvas[1])
    return area.x + vx * sx, area.y + vy * sy


def screen_to_view(px: float, py: float, area: Rect, canvas: Point) -> Point:
    sx = _at_least_one(canvas[0]) / _at_least_one(area.width)
    sy = _at_least_one(canvas[1]) / _at_least_one(area.height)
    return (px - area.x) * sx, (py - area.y) * sy


# ───────────────── model <-> screen ─────────────────

def model_to_screen(mx: float, my: float, zoom: float, pan: Point, area: Rect, canvas: Point) -> Point:
    vx, vy = model_to_view(mx, my, zoom, pan)
    return view_to_screen(vx, vy, area, canvas)


def screen_to_model(px: float, py: float, zoom: float, pan: Point, area: Rect, canvas: Point) -> Point:
    vx, vy = screen_to_view(px, py, area, canvas)
    return view_to_model(vx, vy, zoom, pan)


def screen_delta_to_model(dx: float, dy: float, zoom: float, area: Rect, canvas: Point) -> Point:
    """Linear part of screen_to_model (pan and area offset drop out)."""
    sx = _at_least_one(canvas[0]) / _at_least_one(area.width)
    sy = _at_least_one(canvas[1]) / _at_least_one(area.height)
    return dx * sx / zoom, dy * sy / zoom
