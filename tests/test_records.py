import json
import tempfile
import unittest
from pathlib import Path

from storage.records import RecordStore


class RecordStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "records.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_values_survive_reload(self) -> None:
        rs = RecordStore(self.path)
        self.assertTrue(rs.bump_max("math.best_streak", 4))
        self.assertFalse(rs.bump_max("math.best_streak", 3))
        self.assertEqual(rs.increment("math.total_solved", 5), 5)
        rs.save()
        again = RecordStore(self.path)
        self.assertEqual(again.get("math.best_streak"), 4)
        self.assertEqual(again.get("math.total_solved"), 5)

    def test_capped_list_newest_first(self) -> None:
        rs = RecordStore()
        for n in range(5):
            rs.append_capped("units.history", {"n": n}, 3)
        self.assertEqual([e["n"] for e in rs.get_list("units.history")], [4, 3, 2])
        rs.clear_list("units.history")
        self.assertEqual(rs.get_list("units.history"), [])

    def test_corrupt_file_degrades_to_empty(self) -> None:
        self.path.write_text("{ not json", encoding="utf-8")
        rs = RecordStore(self.path)
        self.assertIsNone(rs.get("anything"))
        self.path.write_text(json.dumps({"schema": 99, "values": {"a": 1}}), encoding="utf-8")
        rs.reload()
        self.assertIsNone(rs.get("a"))
        for schema in ("x", None, [1]):
            self.path.write_text(json.dumps({"schema": schema, "values": {"a": 1}}), encoding="utf-8")
            self.assertIsNone(RecordStore(self.path).get("a"))

    def test_non_numeric_stored_values_count_as_absent(self) -> None:
        values = {"high": "oops", "count": "many", "flag": True}
        self.path.write_text(json.dumps({"schema": 1, "values": values}), encoding="utf-8")
        rs = RecordStore(self.path)
        self.assertTrue(rs.bump_max("high", 5))
        self.assertEqual(rs.get("high"), 5)
        self.assertEqual(rs.increment("count", 2), 2)
        self.assertEqual(rs.increment("flag"), 1)

    def test_memory_store_never_writes(self) -> None:
        rs = RecordStore()
        rs.put("k", 1)
        rs.save()
        self.assertFalse(self.path.exists())


if __name__ == "__main__":
    unittest.main()
