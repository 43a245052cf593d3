import json
import os
import tempfile
import unittest

from netmap.config import REFRESH_MS, ViewConfig
from netmap.export import layout_from_dict, sample_snapshot
from netmap.snapshot import Snapshot, SnapshotError, validate_snapshot


class TestValidateSnapshot(unittest.TestCase):
    def test_sample_is_valid(self):
        self.assertEqual(validate_snapshot(sample_snapshot()), [])

    def test_top_level_shape(self):
        self.assertEqual(validate_snapshot([]), ["Top-level must be an object."])
        problems = validate_snapshot({"devices": {}, "clients": "x", "uplinks": []})
        self.assertIn("'devices' must be a list.", problems)
        self.assertIn("'clients' must be a list.", problems)
        self.assertIn("'uplinks' must be an object mapping device id to uplink id.", problems)

    def test_item_problems(self):
        data = {
            "devices": [
                {"id": "", "features": ["switching"]},
                {"id": "sw", "features": "switching"},
                {"id": "sw", "name": 7},
            ],
            "clients": [
                {"id": "c1"},
                {"id": "c2", "type": "WIRED", "uplinkDeviceId": 5},
            ],
            "uplinks": {"sw": None},
        }
        problems = validate_snapshot(data)
        self.assertIn("devices[0].id must be a non-empty string.", problems)
        self.assertIn("devices[1].features must be a list of strings.", problems)
        self.assertIn("Duplicate node id: sw", problems)
        self.assertIn("devices[2].name must be a string.", problems)
        self.assertIn("clients[0].type must be a string.", problems)
        self.assertIn("clients[1].uplinkDeviceId must be a string when present.", problems)
        self.assertIn("uplinks['sw'] must be a device id string.", problems)

    def test_dangling_uplink_is_not_a_problem(self):
        data = {"devices": [{"id": "sw"}], "clients": [], "uplinks": {"sw": "gone"}}
        self.assertEqual(validate_snapshot(data), [])


class TestSnapshotModel(unittest.TestCase):
    def test_camel_and_snake_case_keys(self):
        camel = Snapshot.from_dict(
            {"siteName": "HQ", "clients": [{"id": "c", "type": "WIRED", "uplinkDeviceId": "sw"}]}
        )
        snake = Snapshot.from_dict(
            {"site_name": "HQ", "clients": [{"id": "c", "type": "WIRED", "uplink_device_id": "sw"}]}
        )
        self.assertEqual(camel, snake)
        self.assertEqual(camel.site_name, "HQ")
        self.assertEqual(camel.clients[0].uplink_device_id, "sw")

    def test_defaults_and_unknown_keys(self):
        snap = Snapshot.from_dict({"devices": [{"id": "d", "mac": "aa:bb"}]})
        device = snap.devices[0]
        self.assertEqual((device.name, device.features, device.state), ("", [], "UNKNOWN"))
        self.assertEqual(snap.uplinks, {})
        self.assertIsNone(snap.site_name)

    def test_invalid_payload_raises_snapshot_error(self):
        with self.assertRaises(SnapshotError):
            Snapshot.from_dict({"clients": [{"id": "c"}]})
        with self.assertRaises(SnapshotError):
            Snapshot.from_dict("not a snapshot")

    def test_from_json_file(self):
        with tempfile.TemporaryDirectory() as d:
            good = os.path.join(d, "snap.json")
            with open(good, "w", encoding="utf-8") as f:
                json.dump(sample_snapshot(), f)
            self.assertEqual(Snapshot.from_json_file(good).site_name, "Sample Site")

            bad = os.path.join(d, "bad.json")
            with open(bad, "w", encoding="utf-8") as f:
                f.write("{not json")
            with self.assertRaises(SnapshotError):
                Snapshot.from_json_file(bad)

            with self.assertRaises(OSError):
                Snapshot.from_json_file(os.path.join(d, "missing.json"))


class TestLayoutFromDict(unittest.TestCase):
    def test_sample_layout(self):
        result = layout_from_dict(sample_snapshot())
        self.assertTrue(result["ok"])
        self.assertEqual(result["roots"], ["c-stale", "gw-01"])
        self.assertEqual(result["skippedClients"], ["c-remote"])
        self.assertEqual(len(result["nodes"]), 9)

        by_id = {n["id"]: n for n in result["nodes"]}
        self.assertEqual(by_id["ap-hall"]["deviceType"], "ACCESS_POINT")
        self.assertEqual(by_id["ap-hall"]["state"], "OTHER")
        self.assertEqual(by_id["c-printer"]["name"], "")
        self.assertEqual(by_id["sw-core"]["parentId"], "gw-01")
        self.assertLess(by_id["gw-01"]["y"], by_id["sw-core"]["y"])
        for n in result["nodes"]:
            self.assertTrue(0 <= n["x"] <= 100 and 0 <= n["y"] <= 100)

    def test_problems_are_returned_not_raised(self):
        result = layout_from_dict({"devices": "nope"})
        self.assertFalse(result["ok"])
        self.assertEqual(result["nodes"], [])
        self.assertIn("'devices' must be a list.", result["problems"])

    def test_payloads_the_models_would_reject_come_back_as_problems(self):
        cases = [
            ({"devices": [{"id": "a", "state": 5}]}, "devices[0].state must be a string."),
            ({"clients": [{"id": "c", "type": "WIRED", "name": 5}]}, "clients[0].name must be a string when present."),
            ({"siteName": 7}, "'siteName' must be a string when present."),
        ]
        for data, problem in cases:
            result = layout_from_dict(data)
            self.assertFalse(result["ok"], data)
            self.assertIn(problem, result["problems"])
            self.assertEqual(result["nodes"], [])

    def test_null_device_name_and_state_are_accepted(self):
        result = layout_from_dict({"devices": [{"id": "a", "name": None, "state": None}]})
        self.assertTrue(result["ok"])
        node = result["nodes"][0]
        self.assertEqual(node["name"], "")
        self.assertEqual(node["state"], "OTHER")
        self.assertEqual(result["roots"], ["a"])


class TestViewConfig(unittest.TestCase):
    def test_defaults_without_env(self):
        self.assertEqual(ViewConfig.from_env({}), ViewConfig())

    def test_overrides(self):
        cfg = ViewConfig.from_env(
            {"NETMAP_HIT_RADIUS": "6.5", "NETMAP_ZOOM_STEP": "1.5", "NETMAP_REFRESH_MS": "250"}
        )
        self.assertEqual((cfg.hit_radius, cfg.zoom_step, cfg.refresh_ms), (6.5, 1.5, 250))

    def test_bad_values_ignored(self):
        cfg = ViewConfig.from_env(
            {"NETMAP_HIT_RADIUS": "-1", "NETMAP_ZOOM_STEP": "1.0", "NETMAP_REFRESH_MS": "soon"}
        )
        self.assertEqual(cfg, ViewConfig())
        self.assertEqual(cfg.refresh_ms, REFRESH_MS)



if __name__ == "__main__":
    unittest.main()
