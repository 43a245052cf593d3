import json
import os
import tempfile
import unittest

import session_log
from netmap.controller import TopologyView
from netmap.transform import Rect
from session_log import SessionLogger

from .helpers import scenario_a


class TestSessionLogger(unittest.TestCase):
    def test_bounded(self):
        log = SessionLogger(max_events=3)
        for i in range(5):
            log.add(session_log.ZOOM, zoom=i)
        self.assertEqual([e.data["zoom"] for e in log.events], [2, 3, 4])
        self.assertEqual(log.dropped, 2)

    def test_queries(self):
        log = SessionLogger()
        self.assertIsNone(log.last())
        log.add(session_log.NODE_SELECTED, id="a")
        log.add(session_log.ZOOM, zoom=1.2)
        log.add(session_log.NODE_SELECTED, id="b")
        self.assertEqual([e.data["id"] for e in log.events_of("node_selected")], ["a", "b"])
        self.assertEqual(log.last().kind, "node_selected")
        self.assertEqual(log.last("zoom").data, {"zoom": 1.2})
        self.assertEqual(log.counts(), {"node_selected": 2, "zoom": 1})
        log.clear()
        self.assertEqual(log.events, [])
        self.assertEqual(log.dropped, 0)

    def test_muted_kinds_are_not_recorded(self):
        log = SessionLogger(mute=[session_log.ZOOM])
        log.add(session_log.ZOOM, zoom=1.2)
        log.add(session_log.COMMAND, command="zoom_in")
        self.assertEqual([e.kind for e in log.events], ["command"])

    def test_unknown_kinds(self):
        log = SessionLogger()
        log.add(session_log.SESSION_START)
        log.add(session_log.SNAPSHOT_APPLIED, nodeCount=0, rootCount=0)
        log.add("mouse_left_down", x=1, y=2)
        self.assertEqual(log.unknown_kinds(), ["mouse_left_down"])

    def test_save_and_load(self):
        log = SessionLogger()
        log.add(session_log.SNAPSHOT_APPLIED, nodeCount=3, rootCount=1)
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "session.json")
            log.save_json(path)
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            loaded = SessionLogger.load_json(path)

            other = os.path.join(d, "other.json")
            with open(other, "w", encoding="utf-8") as f:
                json.dump({"schema": "topo-session-log/v1", "events": []}, f)
            with self.assertRaises(ValueError):
                SessionLogger.load_json(other)

        self.assertEqual(data["schema"], "netmap-session-log/v1")
        self.assertEqual(data["eventCount"], 1)
        self.assertEqual(data["counts"], {"snapshot_applied": 1})
        self.assertEqual(data["events"][0]["data"]["nodeCount"], 3)
        self.assertEqual(loaded.events, log.events)


class TestTopologyViewEvents(unittest.TestCase):
    def test_view_only_emits_known_kinds(self):
        log = SessionLogger()
        view = TopologyView(log_event_cb=log.add)
        view.update(*scenario_a())
        area = Rect(0, 0, 100, 100)
        view.on_pointer_down(50, 40, area)
        view.on_pointer_drag(55, 40, area)
        view.on_pointer_up()
        view.on_pointer_down(5, 95, area)
        for key in ("+", "-", "r", "Return", "Escape"):
            view.handle_key(key)
        self.assertEqual(log.unknown_kinds(), [])
        self.assertTrue(set(log.counts()) <= session_log.TOPOLOGY_EVENTS)

    def test_selection_trail(self):
        log = SessionLogger()
        view = TopologyView(log_event_cb=log.add)
        view.update(*scenario_a())
        area = Rect(0, 0, 100, 100)
        view.on_pointer_down(50, 40, area)
        view.on_pointer_up()
        view.on_pointer_down(5, 95, area)
        view.on_pointer_up()
        view.on_pointer_down(50, 60, area)
        self.assertEqual(log.selection_trail(), ["sw1", None, "c1"])


if __name__ == "__main__":
    unittest.main()
