import tempfile
import unittest
from pathlib import Path

from sarif_insight.io import read_json, write_json_atomic, write_text_atomic
from sarif_insight.io.fs import read_report_text


class TestSafeIO(unittest.TestCase):
    def test_write_json_is_atomic_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "out" / "export.json"

            payload = {"a": 1, "b": True, "c": None, "nested": {"x": "ÿ"}}
            write_json_atomic(out_path, payload)

            self.assertTrue(out_path.exists())
            self.assertEqual(payload, read_json(out_path))
            # No temp files left behind
            self.assertEqual(["export.json"], sorted(p.name for p in out_path.parent.iterdir()))

    def test_overwrite_replaces_content(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "a.txt"
            write_text_atomic(p, "one")
            write_text_atomic(p, "two")
            self.assertEqual("two", p.read_text(encoding="utf-8"))

    def test_read_report_text_strips_bom(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "bom.sarif"
            p.write_bytes('\ufeff{"version": "2.1.0"}'.encode("utf-8"))
            self.assertEqual('{"version": "2.1.0"}', read_report_text(p))


if __name__ == "__main__":
    unittest.main()
