"""Set-name resolution against a per-game catalog.

The catalog is held in a ``SetCatalogCache`` owned by the caller. Nothing in
this module keeps state of its own.
"""
import logging
from typing import Callable, Dict, Iterable, List, Optional

from gearscan.catalog_source import default_catalog
from gearscan.models import Game, SetCatalogEntry
from gearscan.normalize import collapse_spaces, normalize_glyphs
from gearscan.translate import fuzzy_pattern
from gearscan.utils import compress_name

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[Game], Iterable[object]]


def _text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def coerce_entry(row: object) -> Optional[SetCatalogEntry]:
    """Build an entry from a catalog row, stringifying any non-string field."""
    if isinstance(row, SetCatalogEntry):
        name, short_id, kind = row.display_name, row.short_id, row.kind
    elif isinstance(row, dict):
        name = row.get("name", row.get("display_name"))
        short_id = row.get("short_id", "")
        kind = row.get("set_kind", row.get("kind", ""))
    else:
        name, short_id, kind = row, "", ""
    name = collapse_spaces(_text(name))
    if not name:
        return None
    return SetCatalogEntry(display_name=name, short_id=_text(short_id).strip(), kind=_text(kind).strip())


class SetCatalogCache:
    """Per-game catalog rows, loaded on demand and kept for the process lifetime."""

    def __init__(self) -> None:
        self._entries: Dict[Game, List[SetCatalogEntry]] = {}

    def is_ready(self, game: Game) -> bool:
        return Game.parse(game) in self._entries

    def put(self, game: Game, rows: Iterable[object]) -> List[SetCatalogEntry]:
        entries = [e for e in (coerce_entry(row) for row in rows or []) if e is not None]
        self._entries[Game.parse(game)] = entries
        return entries

    def load(self, game: Game, loader: CatalogLoader) -> List[SetCatalogEntry]:
        game = Game.parse(game)
        if game not in self._entries:
            entries = self.put(game, loader(game))
            logger.debug("loaded %d %s set(s) into catalog cache", len(entries), game.value)
        return self._entries[game]

    def get(self, game: Game) -> List[SetCatalogEntry]:
        return list(self._entries.get(Game.parse(game), []))

    def clear(self) -> None:
        self._entries.clear()


def _normalized(text: str) -> str:
    return collapse_spaces(normalize_glyphs(text).replace("\n", " ").replace("\r", " ")).lower()


def score_entry(raw: str, entry: SetCatalogEntry) -> int:
    text = _normalized(raw)
    name = _normalized(entry.display_name)
    if not name:
        return 0
    score = 0
    if name in text:
        score += 2 * len(name)
    compressed = compress_name(name)
    if compressed and compressed in compress_name(text):
        score += len(compressed)
    if fuzzy_pattern(name).search(text):
        score += len(name)
    return score


def resolve_set(raw: str, entries: Iterable[SetCatalogEntry]) -> Optional[SetCatalogEntry]:
    best, best_score = None, 0
    for entry in entries:
        score = score_entry(raw or "", entry)
        if score > best_score:
            best, best_score = entry, score
    return best


def resolve_set_name(raw: str, entries: Iterable[SetCatalogEntry]) -> Optional[str]:
    best = resolve_set(raw, entries)
    return best.display_name if best else None


class SetResolver:
    def __init__(self, cache: SetCatalogCache, loader: Optional[CatalogLoader] = None):
        self.cache = cache
        self.loader = loader or default_catalog

    def entries(self, game: Game) -> List[SetCatalogEntry]:
        return self.cache.load(game, self.loader)

    def resolve(self, raw: str, game: Game) -> Optional[str]:
        return resolve_set_name(raw, self.entries(game))
