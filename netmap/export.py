from __future__ import annotations

from typing import Any, Dict, List, Optional

import session_log

from .builder import build_from_snapshot
from .config import ViewConfig
from .layout import find_roots, layout_nodes
from .snapshot import Snapshot, SnapshotError, validate_snapshot


def layout_from_dict(data: Any, config: Optional[ViewConfig] = None) -> Dict[str, Any]:
    """Validate, build and lay out a raw snapshot in one go.

    Problems are returned in the payload instead of raised so callers that
    only speak JSON (the MCP tools) get something useful back.
    """
    problems = validate_snapshot(data)
    if problems:
        return _rejected(problems)
    try:
        snapshot = Snapshot.from_dict(data)
    except SnapshotError as e:
        # Shapes the problem list does not cover yet.
        return _rejected(str(e).splitlines())

    cfg = config or ViewConfig()
    skipped = []

    def note(kind: str, **info: Any) -> None:
        if kind == session_log.CLIENT_SKIPPED:
            skipped.append(info.get("id"))

    nodes = build_from_snapshot(snapshot, log_event=note)
    layout_nodes(nodes, cfg.canvas_width, cfg.canvas_height, cfg.root_band, cfg.depth_band)
    return {
        "ok": True,
        "problems": [],
        "roots": find_roots(nodes),
        "skippedClients": skipped,
        "nodes": [nodes[k].to_dict() for k in sorted(nodes)],
    }


def _rejected(problems: List[str]) -> Dict[str, Any]:
    return {"ok": False, "problems": problems, "nodes": [], "roots": [], "skippedClients": []}


def sample_snapshot() -> Dict[str, Any]:
    """Small single-site network: gateway, two switches, an AP and clients.

    One client points at a device that is not in the snapshot, which the map
    shows as an extra root.
    """
    devices = [
        {"id": "gw-01", "name": "UDM Pro", "features": [], "state": "ONLINE"},
        {"id": "sw-core", "name": "Core Switch", "features": ["switching"], "state": "ONLINE"},
        {"id": "sw-lab", "name": "Lab Switch", "features": ["switching"], "state": "OFFLINE"},
        {"id": "ap-hall", "name": "Hallway AP", "features": ["accessPoint"], "state": "UPDATING"},
    ]
    uplinks = {"sw-core": "gw-01", "sw-lab": "sw-core", "ap-hall": "sw-core"}
    clients = [
        {"id": "c-nas", "name": "nas", "type": "WIRED", "uplinkDeviceId": "sw-core"},
        {"id": "c-printer", "name": "", "type": "WIRED", "uplinkDeviceId": "sw-lab"},
        {"id": "c-phone", "name": "phone", "type": "WIRELESS", "uplinkDeviceId": "ap-hall"},
        {"id": "c-laptop", "name": "laptop", "type": "WIRELESS", "uplinkDeviceId": "ap-hall"},
        {"id": "c-remote", "name": "remote", "type": "VPN", "uplinkDeviceId": "gw-01"},
        {"id": "c-stale", "name": "old tablet", "type": "WIRELESS", "uplinkDeviceId": "ap-gone"},
    ]
    return {"siteName": "Sample Site", "devices": devices, "clients": clients, "uplinks": uplinks}
