"""Where set catalogs and character base stats come from.

Catalogs are JSON rows of ``{name, short_id, set_kind}``. They come from a
file, from the packaged defaults, or from an ``/api/sets`` endpoint over HTTP.
"""
import logging
import os
import re
import time
from typing import Dict, List, Optional

import orjson
import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from gearscan.config import (
    CATALOG_DIR,
    PACKAGED_CATALOG_DIR,
    RATE_LIMIT_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
    USER_AGENT,
)
from gearscan.models import BaseStats, Game

logger = logging.getLogger(__name__)

_EDGE_JUNK = re.compile(r"^[^A-Za-zก-๙]+|[^A-Za-zก-๙]+$")

ELEMENT_COLUMNS = {
    "pyro_pct": ("pyro_dmg_pct",),
    "hydro_pct": ("hydro_dmg_pct",),
    "electro_pct": ("electro_dmg_pct",),
    "cryo_pct": ("cryo_dmg_pct",),
    "anemo_pct": ("anemo_dmg_pct",),
    "geo_pct": ("geo_dmg_pct",),
    "dendro_pct": ("dendro_dmg_pct",),
    "physical_pct": ("phys_dmg_pct", "physical_dmg_pct"),
}


class CatalogError(Exception):
    pass


def _rows(payload) -> List[object]:
    if isinstance(payload, dict):
        payload = payload.get("rows") or []
    if not isinstance(payload, list):
        raise CatalogError("Catalog payload must be a list or an object with 'rows'")
    return payload


def load_catalog_file(path: str) -> List[object]:
    with open(path, "rb") as handle:
        try:
            payload = orjson.loads(handle.read())
        except orjson.JSONDecodeError as exc:
            raise CatalogError(f"{path}: {exc}") from exc
    return _rows(payload)


def default_catalog(game: Game) -> List[object]:
    """Rows for ``game`` from GEARSCAN_CATALOG_DIR when set, else the packaged file."""
    game = Game.parse(game)
    filename = f"sets_{game.value}.json"
    if CATALOG_DIR:
        override = os.path.join(CATALOG_DIR, filename)
        if os.path.exists(override):
            logger.debug("using catalog override %s", override)
            return load_catalog_file(override)
    return load_catalog_file(os.path.join(PACKAGED_CATALOG_DIR, filename))


@retry(
    wait=wait_exponential(multiplier=1, min=1, max=30),
    stop=stop_after_attempt(5),
    retry=retry_if_exception_type((requests.HTTPError, requests.ConnectionError, CatalogError)),
    reraise=True,
)
def _get(url: str, params: Dict) -> object:
    response = requests.get(
        url,
        params=params,
        headers={"User-Agent": USER_AGENT},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    if response.status_code >= 500:
        raise CatalogError(f"Server error {response.status_code}")
    response.raise_for_status()
    time.sleep(RATE_LIMIT_SECONDS)
    return orjson.loads(response.content)


def fetch_catalog(game: Game, base_url: str) -> List[object]:
    game = Game.parse(game)
    url = base_url.rstrip("/") + "/api/sets"
    try:
        payload = _get(url, {"game": game.value})
    except (requests.RequestException, orjson.JSONDecodeError) as exc:
        raise CatalogError(f"Catalog fetch failed for {game.value}: {exc}") from exc
    if isinstance(payload, dict) and payload.get("ok") is False:
        raise CatalogError(f"Catalog endpoint reported failure for {game.value}")
    return _rows(payload)


def short_id_for(name: str) -> str:
    """Initials of a set name: 'Emblem of Severed Fate' -> 'EoSF'."""
    words = [_EDGE_JUNK.sub("", word) for word in re.sub(r"\s+", " ", name or "").strip().split(" ")]
    return "".join("o" if word.lower() == "of" else word[0].upper() for word in words if word)


def character_key(name: str) -> str:
    return re.sub(r"\s+", "", (name or "").lower())


def _number(row: Dict, *columns: str) -> float:
    for column in columns:
        value = row.get(column)
        if value is None or value == "":
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return 0.0


def base_stats_from_row(row: Dict) -> BaseStats:
    return BaseStats(
        character_name=str(row.get("character_name") or row.get("character_key") or ""),
        hp=_number(row, "hp_base"),
        atk=_number(row, "atk_base"),
        def_=_number(row, "def_base"),
        em=_number(row, "em_base"),
        er_pct=_number(row, "er_pct"),
        cr_pct=_number(row, "cr_pct"),
        cd_pct=_number(row, "cd_pct"),
        dmg_bonus={bucket: _number(row, *cols) for bucket, cols in ELEMENT_COLUMNS.items()},
    )


def load_base_stats(path: str, character: str) -> Optional[BaseStats]:
    """Find ``character`` (by key or display name) in a base-stat table file."""
    wanted = character_key(character)
    if not wanted:
        return None
    for row in load_catalog_file(path):
        if not isinstance(row, dict):
            continue
        keys = {character_key(str(row.get("character_key") or "")), character_key(str(row.get("character_name") or ""))}
        if wanted in keys:
            return base_stats_from_row(row)
    logger.debug("no base stats for %r in %s", character, path)
    return None
