"""
Export and Import functionality for scan history and favorites.

The export document keeps the field names used by earlier exports:

    {"history": [...], "favorites": [...], "timestamp": <epoch ms>}
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional
import logging

from pydantic import ValidationError

from halal.domain.ActivityRecord import ActivityRecord
from halal.infra.Favorites_Repository import FavoritesStore
from halal.infra.History_Repository import HistoryStore
from halal.infra.paths import EXPORTS_DIR
from halal.infra.pdf_utils import generate_pdf_report
from halal.utilities.clock import Clock, now_ms
from halal.utilities.constants import EXPORT_FILENAME_TEMPLATE
from halal.utilities.validators import ExportDocumentInput

logger = logging.getLogger(__name__)


def build_export_document(history: Iterable[ActivityRecord], favorites: Iterable[ActivityRecord],
                          timestamp: int) -> Dict[str, Any]:
    """Serialize history and favorites into the export document."""
    return {
        "history": [r.to_dict() for r in history],
        "favorites": [r.to_dict() for r in favorites],
        "timestamp": timestamp,
    }


class DataExporter:
    """Export history and favorites as JSON or as a PDF report."""

    def __init__(self, history: HistoryStore, favorites: FavoritesStore, clock: Clock = now_ms,
                 exports_dir: Path = EXPORTS_DIR):
        self.history = history
        self.favorites = favorites
        self._clock = clock
        self.exports_dir = Path(exports_dir)

    def build_document(self) -> Dict[str, Any]:
        return build_export_document(self.history.get_items(), self.favorites.get_items(), self._clock())

    def export_json(self, output_path: Optional[Path] = None) -> Optional[Path]:
        """Write the export document to a JSON file and return its path (None on failure)."""
        document = self.build_document()
        if output_path is None:
            output_path = self.exports_dir / EXPORT_FILENAME_TEMPLATE.format(timestamp=document["timestamp"], ext="json")

        try:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            logger.info(f"Exported {len(document['history'])} history and {len(document['favorites'])} favorite records to {output_path}")
            return output_path
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return None

    def export_pdf(self, output_path: Optional[Path] = None) -> Optional[Path]:
        """Write a PDF report of history and favorites and return its path (None on failure)."""
        timestamp = self._clock()
        if output_path is None:
            output_path = self.exports_dir / EXPORT_FILENAME_TEMPLATE.format(timestamp=timestamp, ext="pdf")

        try:
            pdf_bytes = generate_pdf_report(self.history.get_items(), self.favorites.get_items(), timestamp)
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(pdf_bytes)
            logger.info(f"Exported PDF report to {output_path}")
            return output_path
        except OSError as e:
            logger.error(f"PDF export failed: {e}")
            return None


class DataImporter:
    """Import history and favorites from a previous JSON export."""

    def __init__(self, history: HistoryStore, favorites: FavoritesStore):
        self.history = history
        self.favorites = favorites

    def import_document(self, document: Any, merge: bool = True) -> bool:
        """
        Import an already-parsed export document.

        Args:
            document: Parsed JSON export {history, favorites, timestamp}
            merge: If True, merge with existing records; if False, replace
        """
        try:
            parsed = ExportDocumentInput.model_validate(document)
        except ValidationError as e:
            logger.error(f"Import rejected, invalid export document: {e}")
            return False

        if not merge:
            self.history.clear()
            self.favorites.clear()

        # Stores put each added record first, so replay oldest-first to keep the exported order.
        for item in reversed(parsed.history):
            self.history.add(ActivityRecord.from_dict(item.model_dump()))
        for item in reversed(parsed.favorites):
            self.favorites.add(ActivityRecord.from_dict(item.model_dump()))

        logger.info(f"Imported {len(parsed.history)} history and {len(parsed.favorites)} favorite records "
                    f"({'merge' if merge else 'replace'} mode)")
        return True

    def import_json(self, input_path: Path, merge: bool = True) -> bool:
        """Import records from a JSON export file."""
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Import failed: {e}")
            return False
        return self.import_document(document, merge=merge)
