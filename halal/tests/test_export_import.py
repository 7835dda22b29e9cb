import json
import unittest
import tempfile
import shutil
from pathlib import Path

from halal.domain.ActivityRecord import ActivityRecord
from halal.infra.Favorites_Repository import FavoritesStore
from halal.infra.History_Repository import HistoryStore
from halal.infra.Json_Storage import JsonStorage
from halal.logic.classification.engine import classify
from halal.utilities.export_import import DataExporter, DataImporter, build_export_document


def make_record(code: str, ts: int, text: str = "water, salt") -> ActivityRecord:
    return ActivityRecord(code, {"product_name": f"Product {code}", "brands": "Acme"},
                          classify(text, [], []), ts)


class TestDataExportImport(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        storage = JsonStorage(self.tmp_dir / "state")
        self.history = HistoryStore(storage)
        self.favorites = FavoritesStore(storage)
        self.history.add(make_record("A", 1))
        self.history.add(make_record("B", 2, "pork sausage"))
        self.favorites.add(make_record("A", 5))
        self.exporter = DataExporter(self.history, self.favorites, clock=lambda: 1234)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def _fresh_stores(self, name="other"):
        storage = JsonStorage(self.tmp_dir / name)
        return HistoryStore(storage), FavoritesStore(storage)

    def test_document_shape(self):
        document = self.exporter.build_document()
        self.assertEqual(set(document), {"history", "favorites", "timestamp"})
        self.assertEqual(document["timestamp"], 1234)
        self.assertEqual([r["code"] for r in document["history"]], ["B", "A"])
        self.assertEqual(document["favorites"][0]["cls"]["verdict"], "halal")

    def test_build_export_document_with_empty_stores(self):
        self.assertEqual(build_export_document([], [], 7), {"history": [], "favorites": [], "timestamp": 7})

    def test_export_json_writes_file(self):
        target = self.tmp_dir / "out" / "export.json"
        result = self.exporter.export_json(target)
        self.assertEqual(result, target)
        with open(target, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(len(data["history"]), 2)
        self.assertEqual(len(data["favorites"]), 1)

    def test_default_export_file_name(self):
        exporter = DataExporter(self.history, self.favorites, clock=lambda: 1234,
                                exports_dir=self.tmp_dir / "exports")
        self.assertEqual(exporter.export_json(), self.tmp_dir / "exports" / "halal-data-1234.json")
        self.assertTrue((self.tmp_dir / "exports" / "halal-data-1234.json").exists())

    def test_export_pdf_writes_pdf(self):
        target = self.tmp_dir / "report.pdf"
        result = self.exporter.export_pdf(target)
        self.assertEqual(result, target)
        self.assertTrue(target.read_bytes().startswith(b"%PDF"))

    def test_import_round_trip_keeps_order(self):
        target = self.exporter.export_json(self.tmp_dir / "export.json")
        history, favorites = self._fresh_stores()
        importer = DataImporter(history, favorites)
        self.assertTrue(importer.import_json(target))
        self.assertEqual(history.get_items(), self.history.get_items())
        self.assertEqual(favorites.get_items(), self.favorites.get_items())

    def test_import_merge_keeps_existing_records(self):
        history, favorites = self._fresh_stores()
        history.add(make_record("Z", 9))
        importer = DataImporter(history, favorites)
        self.assertTrue(importer.import_document(self.exporter.build_document(), merge=True))
        self.assertEqual([r.identifier for r in history.get_items()], ["B", "A", "Z"])

    def test_import_replace_drops_existing_records(self):
        history, favorites = self._fresh_stores()
        history.add(make_record("Z", 9))
        favorites.add(make_record("Z", 9))
        importer = DataImporter(history, favorites)
        self.assertTrue(importer.import_document(self.exporter.build_document(), merge=False))
        self.assertEqual([r.identifier for r in history.get_items()], ["B", "A"])
        self.assertEqual([r.identifier for r in favorites.get_items()], ["A"])

    def test_invalid_document_is_rejected(self):
        history, favorites = self._fresh_stores()
        importer = DataImporter(history, favorites)
        bad = {"history": [{"code": "X", "cls": {"verdict": "maybe", "reasons": ["?"], "confidence": "high"}}],
               "timestamp": 1}
        self.assertFalse(importer.import_document(bad))
        self.assertFalse(importer.import_document({"history": []}))
        self.assertEqual(history.get_items(), [])

    def test_missing_or_corrupt_file_is_rejected(self):
        history, favorites = self._fresh_stores()
        importer = DataImporter(history, favorites)
        self.assertFalse(importer.import_json(self.tmp_dir / "nope.json"))
        corrupt = self.tmp_dir / "corrupt.json"
        corrupt.write_text("{not json", encoding="utf-8")
        self.assertFalse(importer.import_json(corrupt))
        binary = self.tmp_dir / "binary.json"
        binary.write_bytes(b"\xff\xfe\x00garbage")
        self.assertFalse(importer.import_json(binary))


if __name__ == '__main__':
    unittest.main()
