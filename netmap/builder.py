from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional

import session_log

from .node import (
    ClientKind,
    ClientType,
    DeviceKind,
    DeviceState,
    DeviceType,
    NetworkNode,
    NodeSet,
)
from .snapshot import ClientOverview, DeviceOverview, Snapshot

LogCallback = Callable[..., None]

ACCESS_POINT_FEATURE = "accessPoint"
SWITCHING_FEATURE = "switching"

CLIENT_TYPES = {
    "WIRELESS": ClientType.WIRELESS,
    "WIRED": ClientType.WIRED,
}


def device_type_for(features: Iterable[str]) -> DeviceType:
    tags = set(features or ())
    if ACCESS_POINT_FEATURE in tags:
        return DeviceType.ACCESS_POINT
    if SWITCHING_FEATURE in tags:
        return DeviceType.SWITCH
    return DeviceType.OTHER


def device_state_for(state: Optional[str]) -> DeviceState:
    s = (state or "").strip().upper()
    if s == "ONLINE":
        return DeviceState.ONLINE
    if s == "OFFLINE":
        return DeviceState.OFFLINE
    return DeviceState.OTHER


def link_children(nodes: NodeSet) -> None:
    """Rebuild every children list from parent_id (single pass, sorted by id)."""
    for node in nodes.values():
        node.children = []
    for node in nodes.values():
        if node.parent_id is None:
            continue
        parent = nodes.get(node.parent_id)
        if parent is not None:
            parent.children.append(node.id)
    for node in nodes.values():
        node.children.sort()


def build_nodes(
    devices: Iterable[DeviceOverview],
    clients: Iterable[ClientOverview],
    uplinks: Optional[Mapping[str, str]] = None,
    log_event: Optional[LogCallback] = None,
) -> NodeSet:
    """Turn one controller snapshot into a fresh node set.

    Devices take their parent from ``uplinks`` (device id -> uplink device id).
    Wired and wireless clients hang off their uplink device; any other client
    type is not drawn. Positions are left at the origin for the layout pass.
    """
    uplinks = uplinks or {}
    nodes: NodeSet = {}

    def log(kind: str, **data) -> None:
        if log_event is not None:
            log_event(kind, **data)

    def insert(node: NetworkNode) -> None:
        if node.id in nodes:
            log(session_log.DUPLICATE_NODE_ID, id=node.id)
        nodes[node.id] = node

    for device in devices:
        insert(
            NetworkNode(
                id=device.id,
                name=device.name or "",
                kind=DeviceKind(
                    device_type=device_type_for(device.features),
                    state=device_state_for(device.state),
                ),
                parent_id=uplinks.get(device.id),
            )
        )

    for client in clients:
        client_type = CLIENT_TYPES.get((client.type or "").upper())
        if client_type is None:
            log(session_log.CLIENT_SKIPPED, id=client.id, type=client.type)
            continue
        insert(
            NetworkNode(
                id=client.id,
                name=client.name or "",
                kind=ClientKind(client_type=client_type),
                parent_id=client.uplink_device_id,
            )
        )

    link_children(nodes)
    return nodes


def build_from_snapshot(snapshot: Snapshot, log_event: Optional[LogCallback] = None) -> NodeSet:
    return build_nodes(snapshot.devices, snapshot.clients, snapshot.uplinks, log_event=log_event)
