import tempfile
import unittest
from pathlib import Path

from ingest.upload import DEFAULT_MAX_FILE_BYTES, check_upload, check_upload_path
from sarif_insight.errors import UploadRejected


class TestUploadChecks(unittest.TestCase):
    def test_accepts_sarif_and_json_any_case(self) -> None:
        for name in ("a.sarif", "B.SARIF", "c.json", "d.Json"):
            check_upload(name, 10)

    def test_rejects_other_extensions(self) -> None:
        with self.assertRaises(UploadRejected) as cm:
            check_upload("report.txt", 10)
        self.assertEqual("Please select a .sarif or .json file", cm.exception.message)

    def test_size_limit_is_inclusive(self) -> None:
        check_upload("a.sarif", DEFAULT_MAX_FILE_BYTES)
        with self.assertRaises(UploadRejected) as cm:
            check_upload("a.sarif", DEFAULT_MAX_FILE_BYTES + 1)
        self.assertEqual("File is too large. Maximum size is 50MB.", cm.exception.message)

    def test_custom_limit_and_extensions(self) -> None:
        with self.assertRaises(UploadRejected):
            check_upload("a.json", 11, max_bytes=10, extensions=(".json",))
        with self.assertRaises(UploadRejected):
            check_upload("a.sarif", 1, extensions=(".json",))

    def test_path_checks(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            missing = Path(td) / "nope.sarif"
            with self.assertRaises(UploadRejected) as cm:
                check_upload_path(missing)
            self.assertTrue(cm.exception.message.startswith("File not found:"))

            p = Path(td) / "ok.sarif"
            p.write_text("{}", encoding="utf-8")
            check_upload_path(p)


if __name__ == "__main__":
    unittest.main()
