import orjson
import pytest
import requests

from gearscan import catalog_source
from gearscan.catalog_source import (
    CatalogError,
    default_catalog,
    fetch_catalog,
    load_base_stats,
    load_catalog_file,
    short_id_for,
)
from gearscan.models import Game


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.content = orjson.dumps(payload)

    def raise_for_status(self):
        if 400 <= self.status_code:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr(catalog_source.time, "sleep", lambda seconds: None)


@pytest.mark.parametrize(
    "name,short",
    [
        ("Emblem of Severed Fate", "EoSF"),
        ("Gladiator's Finale", "GF"),
        ("Talia: Kingdom of Banditry", "TKoB"),
        ("Firesmith of Lava-Forging", "FoL"),
        ("  Heart   of Depth ", "HoD"),
    ],
)
def test_short_id_for(name, short):
    assert short_id_for(name) == short


def test_packaged_short_ids_follow_the_rule(monkeypatch):
    monkeypatch.setattr(catalog_source, "CATALOG_DIR", None)
    for game in Game:
        rows = default_catalog(game)
        assert rows
        for row in rows:
            assert short_id_for(row["name"]) == row["short_id"]


def test_catalog_dir_override(tmp_path, monkeypatch):
    (tmp_path / "sets_gi.json").write_bytes(orjson.dumps([{"name": "Golden Troupe"}]))
    monkeypatch.setattr(catalog_source, "CATALOG_DIR", str(tmp_path))
    assert default_catalog("gi") == [{"name": "Golden Troupe"}]
    assert len(default_catalog("hsr")) > 1


def test_load_catalog_file_shapes(tmp_path):
    listed = tmp_path / "list.json"
    listed.write_bytes(orjson.dumps([{"name": "A"}]))
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_bytes(orjson.dumps({"ok": True, "rows": [{"name": "B"}]}))
    assert load_catalog_file(str(listed)) == [{"name": "A"}]
    assert load_catalog_file(str(wrapped)) == [{"name": "B"}]


@pytest.mark.parametrize("content", [b"{not json", b'"just a string"'])
def test_load_catalog_file_rejects_bad_payloads(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_bytes(content)
    with pytest.raises(CatalogError):
        load_catalog_file(str(path))


def test_fetch_catalog_retries_server_errors(monkeypatch):
    calls = []
    replies = [
        FakeResponse(503, {}),
        FakeResponse(200, {"ok": True, "rows": [{"name": "Rutilant Arena", "short_id": "RA"}]}),
    ]

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append((url, params))
        return replies.pop(0)

    monkeypatch.setattr(catalog_source.requests, "get", fake_get)
    rows = fetch_catalog("hsr", "https://example.test/")
    assert rows == [{"name": "Rutilant Arena", "short_id": "RA"}]
    assert calls == [("https://example.test/api/sets", {"game": "hsr"})] * 2


def test_fetch_catalog_gives_up_after_five_attempts(monkeypatch):
    calls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append(url)
        return FakeResponse(500, {})

    monkeypatch.setattr(catalog_source.requests, "get", fake_get)
    with pytest.raises(CatalogError):
        fetch_catalog("gi", "https://example.test")
    assert len(calls) == 5


def test_fetch_catalog_wraps_connection_errors(monkeypatch):
    def fake_get(url, params=None, headers=None, timeout=None):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(catalog_source.requests, "get", fake_get)
    with pytest.raises(CatalogError):
        fetch_catalog("gi", "https://example.test")


def test_fetch_catalog_reports_endpoint_failure(monkeypatch):
    monkeypatch.setattr(
        catalog_source.requests,
        "get",
        lambda url, params=None, headers=None, timeout=None: FakeResponse(200, {"ok": False, "rows": []}),
    )
    with pytest.raises(CatalogError):
        fetch_catalog("gi", "https://example.test")


def test_load_base_stats(tmp_path):
    path = tmp_path / "base.json"
    path.write_bytes(
        orjson.dumps(
            {
                "rows": [
                    {
                        "character_key": "hutao",
                        "character_name": "Hu Tao",
                        "hp_base": 15552,
                        "atk_base": 106,
                        "er_pct": 100,
                        "cr_pct": 5,
                        "cd_pct": "88.4",
                        "pyro_dmg_pct": None,
                    },
                    {"character_key": "eula", "character_name": "Eula", "physical_dmg_pct": 28.8},
                ]
            }
        )
    )
    hutao = load_base_stats(str(path), "Hu Tao")
    assert hutao.character_name == "Hu Tao"
    assert hutao.cd_pct == 88.4
    assert hutao.hp == 15552
    assert hutao.dmg_bonus["pyro_pct"] == 0.0

    eula = load_base_stats(str(path), "EULA")
    assert eula.dmg_bonus["physical_pct"] == 28.8

    assert load_base_stats(str(path), "Nobody") is None
    assert load_base_stats(str(path), "") is None
