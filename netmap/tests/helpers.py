from netmap.snapshot import ClientOverview, DeviceOverview


def dev(uid, features=("switching",), state="ONLINE", name=None):
    return DeviceOverview(id=uid, name=uid if name is None else name, features=list(features), state=state)


def client(uid, uplink, kind="WIRED", name=None):
    return ClientOverview(id=uid, name=name, type=kind, uplink_device_id=uplink)


def scenario_a():
    """gw (root) <- sw1 <- c1 (wired)."""
    devices = [dev("gw", features=()), dev("sw1")]
    clients = [client("c1", "sw1", name="c1")]
    uplinks = {"sw1": "gw"}
    return devices, clients, uplinks
