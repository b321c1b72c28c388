import json
import tempfile
import unittest
from pathlib import Path

from Object_Watch.config import WatchProfile, load_watch_profile


class TestWatchProfile(unittest.TestCase):
    def _write_profile(self, payload) -> Path:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "profile.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_load_ok(self) -> None:
        path = self._write_profile(
            {
                "schema_version": 1,
                "label": "dog",
                "confidence": 0.45,
                "debug": True,
                "frame_id": "base_link",
                "labels_path": "voc.yaml",
            }
        )
        profile = load_watch_profile(path)
        self.assertIsInstance(profile, WatchProfile)
        self.assertEqual(profile.label, "dog")
        self.assertEqual(profile.confidence, 0.45)
        self.assertTrue(profile.debug)
        self.assertEqual(profile.frame_id, "base_link")
        self.assertEqual(profile.labels_path, str((path.parent / "voc.yaml").resolve()))
        self.assertFalse(profile.strict)

    def test_defaults(self) -> None:
        profile = load_watch_profile(self._write_profile({"schema_version": 1}))
        self.assertEqual(profile, WatchProfile())
        self.assertEqual(profile.label, "person")

    def test_out_of_range_confidence_allowed(self) -> None:
        profile = load_watch_profile(self._write_profile({"schema_version": 1, "confidence": 1.5}))
        self.assertEqual(profile.confidence, 1.5)

    def test_unknown_keys_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_watch_profile(self._write_profile({"schema_version": 1, "iou": 0.4}))

    def test_schema_version_required(self) -> None:
        with self.assertRaises(ValueError):
            load_watch_profile(self._write_profile({"label": "person"}))
        with self.assertRaises(ValueError):
            load_watch_profile(self._write_profile({"schema_version": 2}))

    def test_wrong_types_rejected(self) -> None:
        for payload in (
            {"schema_version": 1, "confidence": "high"},
            {"schema_version": 1, "confidence": True},
            {"schema_version": 1, "debug": "yes"},
            {"schema_version": 1, "label": 3},
            {"schema_version": 1, "label": ""},
        ):
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    load_watch_profile(self._write_profile(payload))

    def test_not_an_object(self) -> None:
        with self.assertRaises(ValueError):
            load_watch_profile(self._write_profile([1, 2]))

    def test_invalid_json(self) -> None:
        path = self._write_profile({})
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_watch_profile(path)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_watch_profile(Path("does/not/exist.json"))


if __name__ == "__main__":
    unittest.main()
