from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class DeviceType(Enum):
    ACCESS_POINT = "Access Point"
    SWITCH = "Switch"
    GATEWAY = "Gateway"
    OTHER = "Other"


class DeviceState(Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"
    OTHER = "Other"


class ClientType(Enum):
    WIRELESS = "Wireless"
    WIRED = "Wired"
    VPN = "VPN"


@dataclass(frozen=True)
class DeviceKind:
    device_type: DeviceType
    state: DeviceState

    def describe(self) -> str:
        return f"{self.device_type.value} - {self.state.value}"


@dataclass(frozen=True)
class ClientKind:
    client_type: ClientType

    def describe(self) -> str:
        return self.client_type.value


NodeKind = Union[DeviceKind, ClientKind]


# Colours shared by nodes and edges.
GREEN = "#4caf50"
RED = "#e53935"
YELLOW = "#fdd835"
BLUE = "#1e88e5"
CYAN = "#00acc1"
GRAY = "#9e9e9e"
WHITE = "#ffffff"

DEVICE_SHAPES = {
    DeviceType.ACCESS_POINT: "ap",
    DeviceType.SWITCH: "switch",
    DeviceType.GATEWAY: "gateway",
    DeviceType.OTHER: "device",
}

STATE_COLORS = {
    DeviceState.ONLINE: GREEN,
    DeviceState.OFFLINE: RED,
    DeviceState.OTHER: YELLOW,
}

CLIENT_STYLES = {
    ClientType.WIRELESS: ("wireless", YELLOW),
    ClientType.WIRED: ("wired", BLUE),
    ClientType.VPN: ("vpn", CYAN),
}


def node_style(kind: NodeKind) -> Tuple[str, str]:
    """(shape, colour) for a node kind."""
    if isinstance(kind, DeviceKind):
        return DEVICE_SHAPES[kind.device_type], STATE_COLORS[kind.state]
    if isinstance(kind, ClientKind):
        return CLIENT_STYLES[kind.client_type]
    raise TypeError(f"unknown node kind: {kind!r}")


def edge_color(kind: NodeKind) -> str:
    """Uplink colour, keyed by the child end of the edge."""
    if isinstance(kind, ClientKind):
        if kind.client_type is ClientType.WIRELESS:
            return YELLOW
        if kind.client_type is ClientType.WIRED:
            return BLUE
    return GRAY


@dataclass(frozen=True)
class NodeSummary:
    id: str
    name: str
    kind: NodeKind

    @property
    def is_device(self) -> bool:
        return isinstance(self.kind, DeviceKind)


@dataclass
class NetworkNode:
    id: str
    name: str
    kind: NodeKind
    x: float = 0.0
    y: float = 0.0
    parent_id: Optional[str] = None
    # Derived from parent_id on every rebuild; layout aid only.
    children: List[str] = field(default_factory=list, compare=False, repr=False)

    @property
    def is_device(self) -> bool:
        return isinstance(self.kind, DeviceKind)

    def display_name(self, placeholder: str = "Unknown") -> str:
        return self.name or placeholder

    def summary(self) -> NodeSummary:
        return NodeSummary(id=self.id, name=self.name, kind=self.kind)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "parentId": self.parent_id,
        }
        if isinstance(self.kind, DeviceKind):
            d["kind"] = "device"
            d["deviceType"] = self.kind.device_type.name
            d["state"] = self.kind.state.name
        else:
            d["kind"] = "client"
            d["clientType"] = self.kind.client_type.name
        return d


NodeSet = Dict[str, NetworkNode]
