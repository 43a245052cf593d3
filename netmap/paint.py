"""Paints render primitives onto a Tk-style canvas.

Only the ``create_*`` / ``delete`` subset of ``tkinter.Canvas`` is used, so
anything with the same methods can stand in for it.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from .render import LinePrimitive, PointPrimitive, Primitive, ShapePrimitive, TextPrimitive
from .transform import Point, Rect, view_to_screen

TAG = "netmap"
EDGE_WIDTH = 2
OUTLINE_WIDTH = 2
POINT_RADIUS = 2
LABEL_FONT = ("TkDefaultFont", 9)


def paint(canvas: Any, primitives: Iterable[Primitive], area: Rect, view_size: Point = (100.0, 100.0)) -> List[int]:
    """Clear previous map items and draw ``primitives`` into ``area``.

    Returns the canvas item ids that were created.
    """
    canvas.delete(TAG)
    scale = max(area.width, 1) / max(view_size[0], 1)
    items: List[int] = []

    for prim in primitives:
        if isinstance(prim, LinePrimitive):
            x1, y1 = view_to_screen(prim.x1, prim.y1, area, view_size)
            x2, y2 = view_to_screen(prim.x2, prim.y2, area, view_size)
            items.append(canvas.create_line(x1, y1, x2, y2, fill=prim.color, width=EDGE_WIDTH, tags=(TAG, "edge")))
        elif isinstance(prim, ShapePrimitive):
            x, y = view_to_screen(prim.x, prim.y, area, view_size)
            items.extend(_paint_shape(canvas, prim, x, y, prim.size * scale))
        elif isinstance(prim, PointPrimitive):
            x, y = view_to_screen(prim.x, prim.y, area, view_size)
            r = POINT_RADIUS
            items.append(canvas.create_oval(x - r, y - r, x + r, y + r, fill=prim.color, outline="", tags=(TAG, "selection")))
        elif isinstance(prim, TextPrimitive):
            x, y = view_to_screen(prim.x, prim.y, area, view_size)
            items.append(
                canvas.create_text(x, y, text=prim.text, fill=prim.color, anchor=prim.anchor, font=LABEL_FONT, tags=(TAG, "label"))
            )
    return items


def _circle(canvas: Any, x: float, y: float, r: float, color: str, tags, fill: str = "") -> int:
    return canvas.create_oval(x - r, y - r, x + r, y + r, outline=color, fill=fill, width=OUTLINE_WIDTH, tags=tags)


def _paint_shape(canvas: Any, prim: ShapePrimitive, x: float, y: float, s: float) -> List[int]:
    tags = (TAG, "node", f"node:{prim.node_id}")
    c = prim.color

    if prim.shape == "ap":
        # Three rings, like a broadcast icon.
        return [_circle(canvas, x, y, s * (1 - 0.25 * i), c, tags) for i in range(3)]
    if prim.shape == "switch":
        return [canvas.create_rectangle(x - s, y - s / 2, x + s, y + s / 2, outline=c, width=OUTLINE_WIDTH, tags=tags)]
    if prim.shape == "gateway":
        pts = [x, y - s, x + s, y, x, y + s, x - s, y]
        return [canvas.create_polygon(*pts, outline=c, fill="", width=OUTLINE_WIDTH, tags=tags)]
    if prim.shape == "wireless":
        return [
            _circle(canvas, x, y, max(s * 0.2, 1), c, tags, fill=c),
            _circle(canvas, x, y, s * 0.8, c, tags),
        ]
    if prim.shape == "wired":
        h = s * 0.5
        return [canvas.create_rectangle(x - h, y - h, x + h, y + h, outline=c, width=OUTLINE_WIDTH, tags=tags)]
    if prim.shape == "vpn":
        pts = [x, y - s, x + s, y + s * 0.8, x - s, y + s * 0.8]
        return [canvas.create_polygon(*pts, outline=c, fill="", width=OUTLINE_WIDTH, tags=tags)]
    return [_circle(canvas, x, y, s, c, tags)]
