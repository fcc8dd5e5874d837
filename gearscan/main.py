import argparse
import hashlib
import logging
import os
from typing import Dict, List, Optional

import orjson
from tqdm import tqdm

from gearscan.aggregate import aggregate, format_summary, gap_report
from gearscan.catalog_source import (
    CatalogError,
    default_catalog,
    fetch_catalog,
    load_base_stats,
    load_catalog_file,
    short_id_for,
)
from gearscan.config import CATALOG_URL, DATA_DIR, DEFAULT_GAME, FAILURES_PATH
from gearscan.models import Game, GearItem, Slot
from gearscan.parser import describe_item, parse_gear
from gearscan.sets import SetCatalogCache, SetResolver
from gearscan.utils import slug


def file_hash(path: str) -> str:
    if not os.path.exists(path):
        return ""
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        digest.update(handle.read())
    return digest.hexdigest()


def stored_hash(path: str) -> str:
    if not os.path.exists(path):
        return ""
    with open(path, "rb") as handle:
        try:
            return str(orjson.loads(handle.read()).get("source_sha256") or "")
        except (orjson.JSONDecodeError, AttributeError):
            return ""


def build_resolver(game: Game, catalog: Optional[str], catalog_url: Optional[str]) -> SetResolver:
    if catalog:
        loader = lambda _game: load_catalog_file(catalog)  # noqa: E731
    elif catalog_url:
        loader = lambda g: fetch_catalog(g, catalog_url)  # noqa: E731
    else:
        loader = default_catalog
    cache = SetCatalogCache()
    resolver = SetResolver(cache, loader)
    try:
        resolver.entries(game)
    except (CatalogError, OSError) as exc:
        print(f"[WARN] catalog unavailable ({exc}); using packaged sets")
        cache.put(game, default_catalog(game))
    return resolver


def gear_record(item: GearItem, source: str, source_hash: str, resolver: SetResolver) -> Dict:
    record = item.to_dict()
    record["id"] = slug(os.path.splitext(os.path.basename(source))[0])
    record["source"] = source
    record["source_sha256"] = source_hash
    short_id = next(
        (e.short_id for e in resolver.entries(item.game) if e.display_name == item.set_name and e.short_id),
        None,
    )
    if short_id is None and item.set_name:
        short_id = short_id_for(item.set_name)
    record["short_id"] = short_id
    return record


def write_record(path: str, record: Dict) -> None:
    with open(path, "wb") as handle:
        handle.write(orjson.dumps(record, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))


def log_failure(source: str, exc: Exception) -> None:
    os.makedirs(os.path.dirname(FAILURES_PATH), exist_ok=True)
    with open(FAILURES_PATH, "a", encoding="utf-8") as log:
        log.write(f"{source}\t{type(exc).__name__}: {exc}\n")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Parse gear OCR text into structured records")
    parser.add_argument("files", nargs="+", help="OCR text files, one gear piece per file")
    parser.add_argument(
        "--game",
        default=DEFAULT_GAME,
        choices=[g.value for g in Game],
        help="Game the screenshots come from (default: %(default)s)",
    )
    parser.add_argument("--out", default=DATA_DIR, help="Directory for JSON records")
    parser.add_argument("--catalog", default="", help="JSON file of set catalog rows")
    parser.add_argument(
        "--catalog-url",
        default=CATALOG_URL or "",
        help="Base URL serving /api/sets?game=... (default: GEARSCAN_CATALOG_URL)",
    )
    parser.add_argument("--print", dest="show", action="store_true", help="Print a summary per piece")
    parser.add_argument(
        "--aggregate",
        action="store_true",
        help="Sum the parsed pieces (last file per slot wins) and print notes",
    )
    parser.add_argument("--character", default="", help="Character name for base stats and targets")
    parser.add_argument("--role", default="", help="Role hint for targets, e.g. 'burst support'")
    parser.add_argument("--base-stats", default="", help="JSON table of character base stats")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-parse even if the source text has not changed",
    )
    parser.add_argument("--verbose", action="store_true", help="Log classifier decisions")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    game = Game.parse(args.game)
    os.makedirs(args.out, exist_ok=True)
    resolver = build_resolver(game, args.catalog, args.catalog_url)

    written = skipped = failed = 0
    loadout: Dict[Slot, GearItem] = {}

    for source in tqdm(args.files, desc="Parsing", disable=len(args.files) < 2):
        try:
            source_hash = file_hash(source)
            if not source_hash:
                raise FileNotFoundError(source)
            output_path = os.path.join(args.out, f"{slug(os.path.splitext(os.path.basename(source))[0])}.json")
            if not args.force and stored_hash(output_path) == source_hash:
                with open(output_path, "rb") as handle:
                    item = GearItem.from_dict(orjson.loads(handle.read()))
                skipped += 1
            else:
                with open(source, "r", encoding="utf-8", errors="replace") as handle:
                    raw = handle.read()
                item = parse_gear(raw, game, resolver)
                write_record(output_path, gear_record(item, source, source_hash, resolver))
                written += 1
            loadout[item.slot] = item
            if args.show:
                print(f"[OK] {source}")
                for line in describe_item(item):
                    print(f"  {line}")
        except Exception as exc:  # noqa: BLE001
            failed += 1
            log_failure(source, exc)
            print(f"[ERROR] {source}: {exc}")

    if args.aggregate and loadout:
        base = None
        if args.base_stats and args.character:
            base = load_base_stats(args.base_stats, args.character)
            if base is None:
                print(f"[WARN] no base stats for {args.character}; using default baseline")
        result = aggregate(loadout, base=base, character=args.character or None, game=game)
        print("Totals:")
        for line in format_summary(result):
            print(f"  {line}")
        if args.character and game is Game.GI:
            report = gap_report(args.character, result.totals, args.role or None)
            print(orjson.dumps(report, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode())

    print(f"Done. written={written} skipped={skipped} failed={failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
