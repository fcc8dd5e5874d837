import pytest

from gearscan.catalog_source import default_catalog
from gearscan.models import Game, SetCatalogEntry
from gearscan.sets import (
    SetCatalogCache,
    SetResolver,
    resolve_set,
    resolve_set_name,
    score_entry,
)

GLADIATOR = SetCatalogEntry("Gladiator's Finale", "GF")
ENTRIES = [
    SetCatalogEntry("Heart of Depth", "HoD"),
    GLADIATOR,
    SetCatalogEntry("Emblem of Severed Fate", "EoSF"),
]


def test_exact_name_scores_all_three_comparisons():
    # literal 2*18, compressed 16, fuzzy 18
    assert score_entry("Gladiator's Finale\nPlume of Death", GLADIATOR) == 36 + 16 + 18


def test_ocr_spacing_still_resolves():
    raw = "Gladiator' s  Fin ale\nATK 311"
    assert score_entry(raw, GLADIATOR) > 0
    assert resolve_set_name(raw, ENTRIES) == "Gladiator's Finale"


def test_case_and_quote_glyphs_are_ignored():
    assert resolve_set_name("EMBLEM OF SEVERED FATE", ENTRIES) == "Emblem of Severed Fate"
    assert resolve_set_name("Gladiator’s Finale", ENTRIES) == "Gladiator's Finale"


def test_no_overlap_means_none():
    assert resolve_set("Circlet of Logos\nCRIT DMG 62.2%", ENTRIES) is None
    assert resolve_set_name("", ENTRIES) is None
    assert resolve_set_name("Heart of Depth", []) is None


def test_earliest_entry_wins_a_tie():
    twins = [SetCatalogEntry("Heart of Depth", "A"), SetCatalogEntry("Heart of Depth", "B")]
    assert resolve_set("Heart of Depth", twins).short_id == "A"


@pytest.mark.parametrize("tail", ["", "\nrandom words", " 123 +20 • ATK 19", "\nขนนก"])
def test_trailing_noise_does_not_change_resolution(tail):
    raw = "Emblem of Severed Fate\nSands of Eon"
    assert resolve_set_name(raw + tail, ENTRIES) == resolve_set_name(raw, ENTRIES)


def test_cache_loads_once_per_game():
    calls = []

    def loader(game):
        calls.append(game)
        return [{"name": "Rutilant Arena", "short_id": "RA", "set_kind": "planar"}]

    cache = SetCatalogCache()
    assert not cache.is_ready("hsr")
    first = cache.load("hsr", loader)
    second = cache.load(Game.HSR, loader)
    assert calls == [Game.HSR]
    assert first == second == [SetCatalogEntry("Rutilant Arena", "RA", "planar")]
    assert cache.is_ready("hsr")
    assert not cache.is_ready("gi")


def test_put_overwrites_instead_of_appending():
    cache = SetCatalogCache()
    rows = [{"name": "Heart of Depth", "short_id": "HoD"}]
    cache.put("gi", rows)
    cache.put("gi", rows)
    assert len(cache.get("gi")) == 1
    cache.clear()
    assert not cache.is_ready("gi")
    assert cache.get("gi") == []


def test_malformed_rows_are_stringified():
    cache = SetCatalogCache()
    entries = cache.put(
        "hsr",
        [
            {"name": 123, "short_id": None, "set_kind": 5},
            "Inert Salsotto",
            {"name": "", "short_id": "X"},
            {"name": None},
        ],
    )
    assert entries == [
        SetCatalogEntry("123", "", "5"),
        SetCatalogEntry("Inert Salsotto", "", ""),
    ]


def test_resolver_uses_packaged_catalog_by_default(monkeypatch):
    monkeypatch.setattr("gearscan.catalog_source.CATALOG_DIR", None)
    resolver = SetResolver(SetCatalogCache())
    assert resolver.resolve("Space Sealing Station\nPlanar Sphere", "hsr") == "Space Sealing Station"
    assert resolver.cache.is_ready("hsr")


def test_resolver_with_custom_loader():
    resolver = SetResolver(SetCatalogCache(), lambda game: ["Heart of Depth"])
    assert resolver.resolve("heart of depth", "gi") == "Heart of Depth"


def test_every_packaged_name_resolves_to_itself(monkeypatch):
    monkeypatch.setattr("gearscan.catalog_source.CATALOG_DIR", None)
    for game in Game:
        cache = SetCatalogCache()
        entries = cache.put(game, default_catalog(game))
        for entry in entries:
            assert resolve_set_name(f"{entry.display_name}\n+20", entries) == entry.display_name
