"""Interactive network topology map used by netmap_view.py.

Builds a device/client tree from a controller snapshot, lays it out in a
fixed 0..100 model space and handles pan/zoom/select/drag. Rendering yields
abstract primitives so any host canvas can paint them.
"""

from .config import ViewConfig
from .controller import TopologyView, PointerEvent, Navigation
from .snapshot import Snapshot, SnapshotError, validate_snapshot
from .transform import Rect

__all__ = [
    "TopologyView",
    "PointerEvent",
    "Navigation",
    "ViewConfig",
    "Snapshot",
    "SnapshotError",
    "validate_snapshot",
    "Rect",
]
