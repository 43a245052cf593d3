"""Projects the node set into view-space draw primitives.

Nothing here mutates state. Edges come first so nodes paint on top of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .node import DeviceKind, DeviceState, NetworkNode, NodeSet, WHITE, edge_color, node_style
from .transform import Point, model_to_view

BASE_SIZE = 2.0
SELECTED_SIZE = 3.0
LABEL_COLOR = WHITE
NAME_PLACEHOLDER = "Unknown"

HELP_TEXT = "Mouse: Drag nodes | +/-: Zoom | r: Reset view | Enter: Focus | Esc: Back"


@dataclass(frozen=True)
class LinePrimitive:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str


@dataclass(frozen=True)
class ShapePrimitive:
    shape: str  # ap|switch|gateway|device|wireless|wired|vpn
    x: float
    y: float
    size: float
    color: str
    node_id: str = ""


@dataclass(frozen=True)
class PointPrimitive:
    x: float
    y: float
    color: str


@dataclass(frozen=True)
class TextPrimitive:
    x: float
    y: float
    text: str
    color: str = LABEL_COLOR
    anchor: str = "n"  # x is the horizontal centre, y the top edge


Primitive = Union[LinePrimitive, ShapePrimitive, PointPrimitive, TextPrimitive]


def render(
    nodes: NodeSet,
    zoom: float,
    pan: Point,
    selected: Optional[str] = None,
) -> List[Primitive]:
    out: List[Primitive] = []
    ordered = [nodes[k] for k in sorted(nodes)]

    for node in ordered:
        if node.parent_id is None or node.parent_id == node.id:
            continue
        parent = nodes.get(node.parent_id)
        if parent is None:
            continue
        x1, y1 = model_to_view(node.x, node.y, zoom, pan)
        x2, y2 = model_to_view(parent.x, parent.y, zoom, pan)
        out.append(LinePrimitive(x1, y1, x2, y2, edge_color(node.kind)))

    for node in ordered:
        out.extend(_node_primitives(node, zoom, pan, node.id == selected))

    return out


def _node_primitives(node: NetworkNode, zoom: float, pan: Point, selected: bool) -> List[Primitive]:
    x, y = model_to_view(node.x, node.y, zoom, pan)
    size = (SELECTED_SIZE if selected else BASE_SIZE) * zoom
    shape, color = node_style(node.kind)

    prims: List[Primitive] = [ShapePrimitive(shape, x, y, size, color, node_id=node.id)]
    if selected:
        prims.append(PointPrimitive(x, y, WHITE))
    prims.append(TextPrimitive(x, y + size * 2.0, node.display_name(NAME_PLACEHOLDER)))
    return prims


# ───────────────── Status text ─────────────────

def selection_status(node: Optional[NetworkNode]) -> str:
    if node is None:
        return "No node selected"
    return f"Selected: {node.display_name(NAME_PLACEHOLDER)} ({node.kind.describe()})"


def count_summary(nodes: NodeSet) -> Tuple[int, int]:
    """(devices online, clients)"""
    online = 0
    clients = 0
    for n in nodes.values():
        if isinstance(n.kind, DeviceKind):
            if n.kind.state is DeviceState.ONLINE:
                online += 1
        else:
            clients += 1
    return online, clients


def header_title(site_name: Optional[str], nodes: NodeSet) -> str:
    online, clients = count_summary(nodes)
    site = site_name or "All Sites"
    return f"Network Topology - {site} [{online} devices online, {clients} clients]"
