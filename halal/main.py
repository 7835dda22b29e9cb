"""Command line host for the HalalCheck core.

    python -m halal.main check 3017620422003 --favorite
    python -m halal.main history
    python -m halal.main export --format pdf
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from halal.domain.ActivityRecord import ActivityRecord
from halal.domain.Errors import ProductLookupError
from halal.domain.Product import brand, display_name, image_url
from halal.events.Event_Bus import EventBus
from halal.infra.Favorites_Repository import FavoritesStore
from halal.infra.History_Repository import HistoryStore
from halal.infra.Json_Storage import JsonStorage
from halal.infra.Preferences_Repository import PreferencesStore
from halal.infra.Product_Cache import ProductCache
from halal.infra.Product_Source import OpenFoodFactsSource
from halal.infra.paths import DATA_DIR
from halal.logic.lookup.service import LookupService
from halal.logic.reporting.statistics import compute_stats
from halal.utilities.config import INGREDIENTS_LANGUAGE, LOG_LEVEL
from halal.utilities.export_import import DataExporter, DataImporter
from halal.utilities.messages import message_for_error, translate
from halal.utilities.validators import BarcodeInput

logger = logging.getLogger("halal_app")


class AppContext:
    """Every stateful component, built once at startup and shared by the commands."""

    def __init__(self, data_dir: Path = DATA_DIR, source=None):
        self.event_bus = EventBus()
        self.storage = JsonStorage(data_dir)
        self.preferences = PreferencesStore(self.storage, event_bus=self.event_bus)
        self.cache = ProductCache(self.storage, event_bus=self.event_bus)
        self.history = HistoryStore(self.storage, event_bus=self.event_bus)
        self.favorites = FavoritesStore(self.storage, event_bus=self.event_bus)
        self.lookup = LookupService(
            source if source is not None else OpenFoodFactsSource(),
            self.cache, self.history, self.favorites,
            event_bus=self.event_bus, language=INGREDIENTS_LANGUAGE,
        )


def format_record(record: ActivityRecord, language: str) -> str:
    lines = [
        f"{display_name(record.payload, language)} ({brand(record.payload)}) [{record.identifier}]",
        f"  {translate(record.classification.verdict, language)} - confidence: {record.classification.confidence}",
    ]
    lines.extend(f"  - {reason}" for reason in record.classification.reasons)
    if image_url(record.payload):
        lines.append(f"  {image_url(record.payload)}")
    if record.harmful_additives:
        lines.append(f"  {translate('harmfulAdditives', language)}: {', '.join(record.harmful_additives)}")
    return "\n".join(lines)


def _print_records(records: List[ActivityRecord], empty_key: str, language: str) -> None:
    if not records:
        print(translate(empty_key, language))
        return
    for record in records:
        print(format_record(record, language))


def _parse_code(raw: str) -> Optional[str]:
    try:
        return BarcodeInput(code=raw).code
    except ValidationError as e:
        print(f"Invalid barcode: {e.errors()[0]['msg']}", file=sys.stderr)
        return None


def cmd_check(ctx: AppContext, args) -> int:
    language = ctx.preferences.language
    code = _parse_code(args.code)
    if code is None:
        return 2
    try:
        record = asyncio.run(ctx.lookup.lookup(code))
    except ProductLookupError as e:
        logger.info(f"Lookup failed: {e}")
        print(message_for_error(e, language), file=sys.stderr)
        return 1
    print(format_record(record, language))
    if args.favorite and not ctx.favorites.contains(record.identifier):
        ctx.lookup.toggle_favorite(record)
        print(translate("addToFavorites", language) + " ✓")
    print(translate("disclaimer", language))
    return 0


def cmd_favorite(ctx: AppContext, args) -> int:
    language = ctx.preferences.language
    code = _parse_code(args.code)
    if code is None:
        return 2
    record = ctx.favorites.get(code) or next((r for r in ctx.history.get_items() if r.identifier == code), None)
    if record is None:
        try:
            record = asyncio.run(ctx.lookup.lookup(code))
        except ProductLookupError as e:
            print(message_for_error(e, language), file=sys.stderr)
            return 1
    added = ctx.lookup.toggle_favorite(record)
    print(translate("addToFavorites" if added else "removeFromFavorites", language) + " ✓")
    return 0


def cmd_history(ctx: AppContext, args) -> int:
    language = ctx.preferences.language
    if args.clear:
        ctx.history.clear()
        print(translate("clearHistory", language) + " ✓")
        return 0
    _print_records(ctx.history.get_items(), "noHistory", language)
    return 0


def cmd_favorites(ctx: AppContext, args) -> int:
    language = ctx.preferences.language
    if args.remove:
        if not ctx.favorites.contains(args.remove):
            print(f"{translate('notInFavorites', language)}: {args.remove}", file=sys.stderr)
            return 1
        ctx.favorites.remove(args.remove)
        print(translate("removeFromFavorites", language) + " ✓")
        return 0
    _print_records(ctx.favorites.get_items(), "noFavorites", language)
    return 0


def cmd_stats(ctx: AppContext, args) -> int:
    language = ctx.preferences.language
    stats = compute_stats(ctx.history.get_items(), ctx.favorites.get_items())
    print(f"{translate('totalScans', language)}: {stats['total']}")
    print(f"{translate('favorites', language)}: {stats['favorites']}")
    for verdict in ("halal", "haram", "doubtful"):
        print(f"{translate(verdict, language)}: {stats[verdict]}")
    return 0


def cmd_export(ctx: AppContext, args) -> int:
    exporter = DataExporter(ctx.history, ctx.favorites, exports_dir=ctx.storage.data_dir / "exports")
    target = Path(args.file) if args.file else None
    result = exporter.export_pdf(target) if args.format == "pdf" else exporter.export_json(target)
    if result is None:
        print(translate("error", ctx.preferences.language), file=sys.stderr)
        return 1
    print(f"{translate('exportData', ctx.preferences.language)} ✓ {result}")
    return 0


def cmd_import(ctx: AppContext, args) -> int:
    importer = DataImporter(ctx.history, ctx.favorites)
    if not importer.import_json(Path(args.file), merge=not args.replace):
        print(translate("error", ctx.preferences.language), file=sys.stderr)
        return 1
    print(f"✓ {args.file}")
    return 0


def cmd_clear_cache(ctx: AppContext, args) -> int:
    ctx.lookup.clear_cache()
    print(translate("cacheCleared", ctx.preferences.language))
    return 0


def cmd_settings(ctx: AppContext, args) -> int:
    if args.lang:
        ctx.preferences.set_language(args.lang)
    if args.dark_mode:
        ctx.preferences.set_dark_mode(args.dark_mode == "on")
    print(f"language: {ctx.preferences.language}")
    print(f"dark_mode: {'on' if ctx.preferences.dark_mode else 'off'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="halal", description="Check whether a food product is halal")
    parser.add_argument('--data-dir', help='Directory holding persisted state')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('check', help='Look a barcode up and classify it')
    p.add_argument('code')
    p.add_argument('--favorite', action='store_true', help='Also save the product to favorites')
    p.set_defaults(func=cmd_check)

    p = sub.add_parser('favorite', help='Toggle a product in favorites')
    p.add_argument('code')
    p.set_defaults(func=cmd_favorite)

    p = sub.add_parser('history', help='Show or clear the scan history')
    p.add_argument('--clear', action='store_true')
    p.set_defaults(func=cmd_history)

    p = sub.add_parser('favorites', help='Show favorites or remove one')
    p.add_argument('--remove', metavar='CODE')
    p.set_defaults(func=cmd_favorites)

    p = sub.add_parser('stats', help='Show scan statistics')
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser('export', help='Export history and favorites')
    p.add_argument('--format', choices=['json', 'pdf'], default='json')
    p.add_argument('--file', help='Output file path')
    p.set_defaults(func=cmd_export)

    p = sub.add_parser('import', help='Import a previous JSON export')
    p.add_argument('--file', required=True)
    p.add_argument('--replace', action='store_true', help='Replace existing records instead of merging')
    p.set_defaults(func=cmd_import)

    p = sub.add_parser('clear-cache', help='Forget cached product lookups')
    p.set_defaults(func=cmd_clear_cache)

    p = sub.add_parser('settings', help='Show or change preferences')
    p.add_argument('--lang', choices=['ar', 'en'])
    p.add_argument('--dark-mode', choices=['on', 'off'])
    p.set_defaults(func=cmd_settings)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    ctx = AppContext(Path(args.data_dir) if args.data_dir else DATA_DIR)
    return args.func(ctx, args)


if __name__ == "__main__":
    sys.exit(main())
