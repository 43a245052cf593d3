from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple
import math

import session_log

from .builder import build_nodes
from .config import ViewConfig
from .layout import bounding_box, find_roots, layout_nodes
from .node import NetworkNode, NodeSet, NodeSummary
from .render import Primitive, header_title, render, selection_status
from .snapshot import ClientOverview, DeviceOverview, Snapshot
from . import transform
from .transform import Point, Rect, clamp, clamp_to_model


# Pointer event kinds
POINTER_DOWN = "down"
POINTER_UP = "up"
POINTER_DRAG = "drag"

# Commands (the host maps its own key events onto these)
ZOOM_IN = "zoom_in"
ZOOM_OUT = "zoom_out"
RESET_VIEW = "reset_view"
CONFIRM = "confirm"
BACK = "back"

KEY_COMMANDS = {
    "+": ZOOM_IN,
    "=": ZOOM_IN,
    "plus": ZOOM_IN,
    "equal": ZOOM_IN,
    "-": ZOOM_OUT,
    "_": ZOOM_OUT,
    "minus": ZOOM_OUT,
    "underscore": ZOOM_OUT,
    "r": RESET_VIEW,
    "Return": CONFIRM,
    "Enter": CONFIRM,
    "Escape": BACK,
    "Esc": BACK,
}


def command_for_key(key: str) -> Optional[str]:
    return KEY_COMMANDS.get(key)


@dataclass(frozen=True)
class PointerEvent:
    kind: str  # down|up|drag
    x: float
    y: float


@dataclass(frozen=True)
class Navigation:
    """Where the host should go next after a command."""

    view: str  # device_detail|client_detail|overview
    node_id: Optional[str] = None


class TopologyView:
    """Owns the node positions and all viewport state.

    The renderer only reads from here; pointer and key input only write here.
    """

    def __init__(
        self,
        config: Optional[ViewConfig] = None,
        log_event_cb: Optional[Callable[..., None]] = None,
    ):
        self.config = config or ViewConfig()
        self.log_event_cb = log_event_cb

        self.nodes: NodeSet = {}
        self.site_name: Optional[str] = None

        self.zoom = 1.0
        self.pan_offset: Point = (0.0, 0.0)
        self.selected_node: Optional[str] = None
        self.dragging_node: Optional[str] = None
        # None until a pointer press; drags before that have no origin.
        self.last_pointer_position: Optional[Point] = None

    @property
    def canvas(self) -> Point:
        return self.config.canvas_width, self.config.canvas_height

    def _log(self, kind: str, **data: Any) -> None:
        if not self.log_event_cb:
            return
        self.log_event_cb(kind, **data)

    # ───────────────── Snapshot / layout ─────────────────

    def update(
        self,
        devices: Iterable[DeviceOverview],
        clients: Iterable[ClientOverview],
        uplinks: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Replace the graph with a fresh snapshot; viewport state carries over."""
        self.nodes = build_nodes(devices, clients, uplinks, log_event=self._log)
        self.relayout()
        self._drop_stale_refs()
        self._log(
            session_log.SNAPSHOT_APPLIED,
            nodeCount=len(self.nodes),
            rootCount=len(find_roots(self.nodes)),
        )

    def update_from_snapshot(self, snapshot: Snapshot) -> None:
        self.site_name = snapshot.site_name
        self.update(snapshot.devices, snapshot.clients, snapshot.uplinks)

    def relayout(self) -> None:
        cfg = self.config
        layout_nodes(self.nodes, cfg.canvas_width, cfg.canvas_height, cfg.root_band, cfg.depth_band)

    def _drop_stale_refs(self) -> None:
        if self.selected_node is not None and self.selected_node not in self.nodes:
            self._log(session_log.SELECTION_DROPPED, id=self.selected_node)
            self.selected_node = None
        if self.dragging_node is not None and (
            self.dragging_node not in self.nodes or self.dragging_node != self.selected_node
        ):
            self._log(session_log.DRAG_DROPPED, id=self.dragging_node)
            self.dragging_node = None

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {nid: (n.x, n.y) for nid, n in self.nodes.items()}

    # ───────────────── Zoom / reset ─────────────────

    def zoom_in(self) -> None:
        self._set_zoom(self.zoom * self.config.zoom_step)

    def zoom_out(self) -> None:
        self._set_zoom(self.zoom / self.config.zoom_step)

    def _set_zoom(self, value: float) -> None:
        new_zoom = clamp(value, self.config.zoom_min, self.config.zoom_max)
        if new_zoom != self.zoom:
            self.zoom = new_zoom
            self._log(session_log.ZOOM, zoom=round(new_zoom, 4))

    def reset_view(self) -> None:
        """Fresh layout at zoom 1, centred in the viewport. Selection is kept."""
        self.zoom = 1.0
        self.pan_offset = (0.0, 0.0)
        self.relayout()

        box = bounding_box(self.nodes)
        if box is not None:
            min_x, min_y, max_x, max_y = box
            cw, ch = self.canvas
            self.pan_offset = ((min_x + max_x) / 2 - cw / 2, (min_y + max_y) / 2 - ch / 2)
        self._log(session_log.RESET_VIEW, pan=list(self.pan_offset))

    # ───────────────── Transforms ─────────────────

    def screen_to_model(self, px: float, py: float, area: Rect) -> Point:
        return transform.screen_to_model(px, py, self.zoom, self.pan_offset, area, self.canvas)

    def model_to_screen(self, mx: float, my: float, area: Rect) -> Point:
        return transform.model_to_screen(mx, my, self.zoom, self.pan_offset, area, self.canvas)

    # ───────────────── Hit testing ─────────────────

    @property
    def hit_radius(self) -> float:
        """Effective hit radius in model units."""
        return self.config.hit_radius * self.zoom

    def hit_radius_on_screen(self, area: Rect) -> float:
        # Horizontal extent of the hit circle once drawn into ``area``.
        dx, _ = transform.screen_delta_to_model(1.0, 0.0, self.zoom, area, self.canvas)
        return self.hit_radius / dx

    def find_node_at(self, mx: float, my: float) -> Optional[str]:
        radius = self.hit_radius
        best: Optional[Tuple[float, str]] = None
        for nid, node in self.nodes.items():
            d = math.hypot(node.x - mx, node.y - my)
            if d >= radius:
                continue
            if best is None or (d, nid) < best:
                best = (d, nid)
        return best[1] if best else None

    # ───────────────── Pointer events ─────────────────

    def on_pointer_down(self, px: float, py: float, area: Rect) -> Optional[str]:
        mx, my = self.screen_to_model(px, py, area)
        hit = self.find_node_at(mx, my)
        self.selected_node = hit
        self.dragging_node = hit
        self.last_pointer_position = (px, py)
        if hit is not None:
            self._log(session_log.NODE_SELECTED, id=hit, x=round(mx, 3), y=round(my, 3))
        else:
            self._log(session_log.SELECTION_CLEARED, x=round(mx, 3), y=round(my, 3))
        return hit

    def on_pointer_up(self) -> None:
        if self.dragging_node is not None:
            node = self.nodes.get(self.dragging_node)
            if node is not None:
                self._log(session_log.NODE_DRAG_DONE, id=node.id, x=round(node.x, 3), y=round(node.y, 3))
        self.dragging_node = None
        self.last_pointer_position = None

    def on_pointer_drag(self, px: float, py: float, area: Rect) -> None:
        if self.last_pointer_position is None:
            return
        dx = px - self.last_pointer_position[0]
        dy = py - self.last_pointer_position[1]
        mdx, mdy = transform.screen_delta_to_model(dx, dy, self.zoom, area, self.canvas)

        if self.dragging_node is not None:
            node = self.nodes.get(self.dragging_node)
            if node is None:
                self._log(session_log.DRAG_DROPPED, id=self.dragging_node)
                self.dragging_node = None
            else:
                node.x, node.y = clamp_to_model(node.x + mdx, node.y + mdy)
        else:
            # Grab-and-drag: the model point under the pointer follows it.
            self.pan_offset = (self.pan_offset[0] - mdx, self.pan_offset[1] - mdy)

        self.last_pointer_position = (px, py)

    def handle_pointer(self, event: PointerEvent, area: Rect) -> None:
        if event.kind == POINTER_DOWN:
            self.on_pointer_down(event.x, event.y, area)
        elif event.kind == POINTER_UP:
            self.on_pointer_up()
        elif event.kind == POINTER_DRAG:
            self.on_pointer_drag(event.x, event.y, area)

    # ───────────────── Selection ─────────────────

    def select_by_id(self, node_id: Optional[str]) -> bool:
        """Select a node directly; an unknown id clears the selection."""
        if node_id is not None and node_id in self.nodes:
            self.selected_node = node_id
            # A drag always belongs to the selected node.
            if self.dragging_node != node_id:
                self.dragging_node = None
            return True
        self.selected_node = None
        self.dragging_node = None
        return False

    def get_selected_node(self) -> Optional[NetworkNode]:
        if self.selected_node is None:
            return None
        return self.nodes.get(self.selected_node)

    def get_selected(self) -> Optional[NodeSummary]:
        node = self.get_selected_node()
        return node.summary() if node is not None else None

    # ───────────────── Commands ─────────────────

    def handle_command(self, command: str) -> Optional[Navigation]:
        self._log(session_log.COMMAND, command=command)
        if command == ZOOM_IN:
            self.zoom_in()
        elif command == ZOOM_OUT:
            self.zoom_out()
        elif command == RESET_VIEW:
            self.reset_view()
        elif command == CONFIRM:
            node = self.get_selected_node()
            if node is None:
                return None
            return Navigation("device_detail" if node.is_device else "client_detail", node.id)
        elif command == BACK:
            return Navigation("overview")
        return None

    def handle_key(self, key: str) -> Optional[Navigation]:
        command = command_for_key(key)
        if command is None:
            return None
        return self.handle_command(command)

    # ───────────────── Rendering ─────────────────

    def render(self) -> List[Primitive]:
        return render(self.nodes, self.zoom, self.pan_offset, self.selected_node)

    def status_text(self) -> str:
        return selection_status(self.get_selected_node())

    def title(self) -> str:
        return header_title(self.site_name, self.nodes)
