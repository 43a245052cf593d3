"""Depth-banded tree layout.

Roots share a band near the top of the canvas, spread evenly left to right.
Each node's children sit one band lower, spread across a full canvas width
centred on their parent. The result depends only on the parent/child
structure and the canvas size, so running it twice gives identical output.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from .config import DEPTH_BAND, ROOT_BAND
from .node import NodeSet
from .transform import clamp_to_model


def find_roots(nodes: NodeSet) -> List[str]:
    """Ids with no parent or a parent missing from the set, sorted."""
    return sorted(
        n.id for n in nodes.values()
        if n.parent_id is None or n.parent_id not in nodes
    )


def _reachable(nodes: NodeSet, starts: Iterable[str]) -> Set[str]:
    seen: Set[str] = set()
    stack = list(starts)
    while stack:
        nid = stack.pop()
        if nid in seen or nid not in nodes:
            continue
        seen.add(nid)
        stack.extend(nodes[nid].children)
    return seen


def layout_roots(nodes: NodeSet) -> List[str]:
    """Roots plus one promoted node per parent cycle.

    A cycle (including a node that is its own parent) has no root, so its
    lowest id is promoted to the top band and the rest hang below it.
    """
    roots = find_roots(nodes)
    placed = _reachable(nodes, roots)
    while len(placed) < len(nodes):
        extra = min(nid for nid in nodes if nid not in placed)
        roots.append(extra)
        placed |= _reachable(nodes, [extra])
    return roots


def layout_nodes(
    nodes: NodeSet,
    canvas_width: float = 100.0,
    canvas_height: float = 100.0,
    root_band: float = ROOT_BAND,
    depth_band: float = DEPTH_BAND,
) -> None:
    """Assign x/y to every node in place."""
    if not nodes:
        return

    width = max(float(canvas_width), 1.0)
    height = max(float(canvas_height), 1.0)
    top = root_band * height
    band = depth_band * height

    roots = layout_roots(nodes)
    root_spacing = width / (len(roots) + 1)

    visited: Set[str] = set()
    # (node id, depth)
    stack: List[Tuple[str, int]] = []
    for i, root_id in enumerate(roots):
        root = nodes[root_id]
        root.x, root.y = clamp_to_model(root_spacing * (i + 1), top)
        visited.add(root_id)
        stack.append((root_id, 0))

    # Explicit stack, not recursion.
    while stack:
        node_id, depth = stack.pop()
        parent = nodes[node_id]
        children = [c for c in parent.children if c in nodes and c not in visited]
        if not children:
            continue

        spacing = width / (len(children) + 1)
        y = top + (depth + 1) * band
        for i, child_id in enumerate(children):
            child = nodes[child_id]
            child.x, child.y = clamp_to_model(parent.x - width / 2 + spacing * (i + 1), y)
            visited.add(child_id)
        for child_id in reversed(children):
            stack.append((child_id, depth + 1))


def bounding_box(nodes: NodeSet) -> Optional[Tuple[float, float, float, float]]:
    if not nodes:
        return None
    xs = [n.x for n in nodes.values()]
    ys = [n.y for n in nodes.values()]
    return min(xs), min(ys), max(xs), max(ys)
