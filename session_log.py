from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
import json

SCHEMA = "netmap-session-log/v1"

# ───────────────── Event kinds ─────────────────

# Snapshot / graph
SNAPSHOT_APPLIED = "snapshot_applied"
SNAPSHOT_ERROR = "snapshot_error"
DUPLICATE_NODE_ID = "duplicate_node_id"
CLIENT_SKIPPED = "client_skipped"

# Selection / pointer
NODE_SELECTED = "node_selected"
SELECTION_CLEARED = "selection_cleared"
SELECTION_DROPPED = "selection_dropped"
DRAG_DROPPED = "drag_dropped"
NODE_DRAG_DONE = "node_drag_done"

# View / commands
ZOOM = "zoom"
RESET_VIEW = "reset_view"
COMMAND = "command"

# Host session
SESSION_START = "session_start"
SESSION_CLEARED = "session_cleared"

TOPOLOGY_EVENTS: FrozenSet[str] = frozenset({
    SNAPSHOT_APPLIED,
    DUPLICATE_NODE_ID,
    CLIENT_SKIPPED,
    NODE_SELECTED,
    SELECTION_CLEARED,
    SELECTION_DROPPED,
    DRAG_DROPPED,
    NODE_DRAG_DONE,
    ZOOM,
    RESET_VIEW,
    COMMAND,
})

HOST_EVENTS: FrozenSet[str] = frozenset({SNAPSHOT_ERROR, SESSION_START, SESSION_CLEARED})


@dataclass
class SessionEvent:
    ts: str
    kind: str
    data: Dict[str, Any]


class SessionLogger:
    """Bounded in-memory event log for the map viewer.

    Records snapshot refreshes, pointer/selection changes and view commands
    so a confusing session can be dumped to JSON and replayed by eye.
    ``add`` has the signature TopologyView expects for ``log_event_cb``.

    ``mute`` names kinds that are dropped on arrival (``zoom`` is chatty
    under a wheel mouse).
    """

    def __init__(self, max_events: int = 5000, mute: Iterable[str] = ()):
        self.max_events = max_events
        self.mute = frozenset(mute)
        self.events: List[SessionEvent] = []
        self.dropped = 0

    def _now(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def add(self, kind: str, **data: Any) -> None:
        kind = str(kind)
        if kind in self.mute:
            return
        self.events.append(SessionEvent(ts=self._now(), kind=kind, data=dict(data)))
        overflow = len(self.events) - self.max_events
        if overflow > 0:
            del self.events[:overflow]
            self.dropped += overflow

    def clear(self) -> None:
        self.events.clear()
        self.dropped = 0

    # ───────────────── Queries ─────────────────

    def events_of(self, kind: str) -> List[SessionEvent]:
        return [e for e in self.events if e.kind == kind]

    def last(self, kind: Optional[str] = None) -> Optional[SessionEvent]:
        for e in reversed(self.events):
            if kind is None or e.kind == kind:
                return e
        return None

    def counts(self) -> Dict[str, int]:
        return dict(Counter(e.kind for e in self.events))

    def unknown_kinds(self) -> List[str]:
        """Kinds in the log that neither the map nor its host emits."""
        known = TOPOLOGY_EVENTS | HOST_EVENTS
        return sorted({e.kind for e in self.events} - known)

    def selection_trail(self) -> List[Optional[str]]:
        """Node ids in the order they were selected; None marks a clear/drop."""
        trail: List[Optional[str]] = []
        for e in self.events:
            if e.kind == NODE_SELECTED:
                trail.append(e.data.get("id"))
            elif e.kind in (SELECTION_CLEARED, SELECTION_DROPPED):
                trail.append(None)
        return trail

    # ───────────────── Persistence ─────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": SCHEMA,
            "eventCount": len(self.events),
            "droppedCount": self.dropped,
            "counts": self.counts(),
            "events": [asdict(e) for e in self.events],
        }

    def save_json(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load_json(cls, path: str) -> "SessionLogger":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if data.get("schema") != SCHEMA:
            raise ValueError(f"{path}: not a netmap session log (schema {data.get('schema')!r})")
        events = [SessionEvent(ts=e["ts"], kind=e["kind"], data=dict(e.get("data") or {})) for e in data["events"]]
        log = cls(max_events=max(len(events), 5000))
        log.events = events
        log.dropped = int(data.get("droppedCount", 0))
        return log
