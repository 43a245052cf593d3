"""Controller snapshot payloads.

A snapshot is what the refresh cycle hands to the map:

    {
      "siteName": "HQ",
      "devices": [{"id": "...", "name": "...", "features": ["switching"], "state": "ONLINE"}],
      "clients": [{"id": "...", "name": "...", "type": "WIRED", "uplinkDeviceId": "..."}],
      "uplinks": {"<device id>": "<uplink device id>"}
    }

Both camelCase and snake_case keys are accepted. Unknown keys are ignored
so raw controller payloads can be passed straight through.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class SnapshotError(Exception):
    pass


class DeviceOverview(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Stable device id")
    name: Optional[str] = Field("", description="Display name, may be empty or null")
    features: List[str] = Field(
        default_factory=list,
        description="Capability tags, e.g. accessPoint, switching",
    )
    state: Optional[str] = Field("UNKNOWN", description="ONLINE, OFFLINE, ADOPTING, ...")


class ClientOverview(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Stable client id")
    name: Optional[str] = Field(None, description="Display name when known")
    type: str = Field(..., description="WIRED, WIRELESS, VPN, TELEPORT")
    uplink_device_id: Optional[str] = Field(
        None,
        alias="uplinkDeviceId",
        description="Device the client is connected through",
    )


class Snapshot(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    site_name: Optional[str] = Field(None, alias="siteName")
    devices: List[DeviceOverview] = Field(default_factory=list)
    clients: List[ClientOverview] = Field(default_factory=list)
    uplinks: Dict[str, str] = Field(
        default_factory=dict,
        description="device id -> uplink device id",
    )

    @classmethod
    def from_dict(cls, data: Any) -> "Snapshot":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SnapshotError(f"invalid snapshot: {e.error_count()} problem(s)\n{e}") from e

    @classmethod
    def from_json_file(cls, path: str) -> "Snapshot":
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise SnapshotError(f"{path}: not valid JSON ({e})") from e
        return cls.from_dict(data)


def _id_problem(where: str, value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return f"{where}.id must be a non-empty string."
    return None


def validate_snapshot(data: Any) -> List[str]:
    """Return human-readable problems with a snapshot payload.

    An empty list means the payload will build. Dangling uplink references
    are not problems: such nodes simply become roots.
    """
    problems: List[str] = []
    if not isinstance(data, dict):
        return ["Top-level must be an object."]

    devices = data.get("devices", [])
    clients = data.get("clients", [])
    uplinks = data.get("uplinks", {})
    if not isinstance(devices, list):
        problems.append("'devices' must be a list.")
        devices = []
    if not isinstance(clients, list):
        problems.append("'clients' must be a list.")
        clients = []
    if not isinstance(uplinks, dict):
        problems.append("'uplinks' must be an object mapping device id to uplink id.")
        uplinks = {}
    site = data.get("siteName", data.get("site_name"))
    if site is not None and not isinstance(site, str):
        problems.append("'siteName' must be a string when present.")

    ids = set()

    def check_id(where: str, value: Any) -> None:
        p = _id_problem(where, value)
        if p:
            problems.append(p)
            return
        if value in ids:
            problems.append(f"Duplicate node id: {value}")
        ids.add(value)

    for i, d in enumerate(devices):
        if not isinstance(d, dict):
            problems.append(f"devices[{i}] must be an object.")
            continue
        check_id(f"devices[{i}]", d.get("id"))
        features = d.get("features", [])
        if not isinstance(features, list) or not all(isinstance(f, str) for f in features):
            problems.append(f"devices[{i}].features must be a list of strings.")
        name = d.get("name", "")
        if name is not None and not isinstance(name, str):
            problems.append(f"devices[{i}].name must be a string.")
        state = d.get("state")
        if state is not None and not isinstance(state, str):
            problems.append(f"devices[{i}].state must be a string.")

    for i, c in enumerate(clients):
        if not isinstance(c, dict):
            problems.append(f"clients[{i}] must be an object.")
            continue
        check_id(f"clients[{i}]", c.get("id"))
        if not isinstance(c.get("type"), str):
            problems.append(f"clients[{i}].type must be a string.")
        name = c.get("name")
        if name is not None and not isinstance(name, str):
            problems.append(f"clients[{i}].name must be a string when present.")
        uplink = c.get("uplinkDeviceId", c.get("uplink_device_id"))
        if uplink is not None and not isinstance(uplink, str):
            problems.append(f"clients[{i}].uplinkDeviceId must be a string when present.")

    for k, v in uplinks.items():
        if not isinstance(v, str):
            problems.append(f"uplinks[{k!r}] must be a device id string.")

    return problems
