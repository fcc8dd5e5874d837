import pytest

from gearscan.mainstat import extract_main_stat, plausible_gi_main
from gearscan.models import Game, GiSlot, HsrSlot, Stat


@pytest.mark.parametrize(
    "game,slot,expected",
    [
        (Game.GI, GiSlot.FLOWER, Stat("HP", "4780")),
        (Game.GI, GiSlot.PLUME, Stat("ATK", "311")),
        (Game.HSR, HsrSlot.HEAD, Stat("HP", "705")),
        (Game.HSR, HsrSlot.HANDS, Stat("ATK", "352")),
    ],
)
def test_fixed_slots_skip_the_scan(game, slot, expected):
    assert extract_main_stat(["CRIT DMG 62.2%", "ATK 46.6%"], slot, game) == expected


def test_goblet_main_from_header():
    lines = ["Goblet of Eonothem", "Pyro DMG Bonus 46.6%", "+20", "• CRIT Rate 3.9%", "• ATK 19"]
    assert extract_main_stat(lines, GiSlot.GOBLET, "gi") == Stat("Pyro DMG Bonus", "46.6%")


def test_circlet_prefers_plausible_percent_over_flat_first_line():
    lines = ["ATK 19", "CRIT DMG 62.2%"]
    assert extract_main_stat(lines, GiSlot.CIRCLET, "gi") == Stat("CRIT DMG", "62.2%")


def test_name_and_value_on_separate_lines():
    lines = ["Sands of Eon", "Elemental Mastery", "187", "• CRIT Rate 3.9%"]
    assert extract_main_stat(lines, GiSlot.SANDS, "gi") == Stat("Elemental Mastery", "187")


def test_value_first_reading():
    lines = ["Body +15", "32.4% CRIT Rate", "• SPD 2"]
    assert extract_main_stat(lines, HsrSlot.BODY, "hsr") == Stat("CRIT Rate", "32.4%")


def test_hsr_body_skips_bulleted_substats():
    lines = ["Body +15", "CRIT Rate 32.4%", "• SPD 2.3", "• ATK 4.3%"]
    assert extract_main_stat(lines, HsrSlot.BODY, "hsr") == Stat("CRIT Rate", "32.4%")


def test_values_are_cleaned():
    lines = ["Link Rope", "Break Effect 64.8 %", "• HP 1,234"]
    assert extract_main_stat(lines, HsrSlot.LINK_ROPE, "hsr") == Stat("Break Effect", "64.8%")


def test_no_candidate_is_not_an_error():
    assert extract_main_stat(["nothing here"], GiSlot.SANDS, "gi") is None
    assert extract_main_stat([], HsrSlot.FEET, "hsr") is None


def test_extraction_is_deterministic():
    lines = ["ATK 43.2%", "HP 43.2%"]
    first = extract_main_stat(lines, HsrSlot.BODY, "hsr")
    assert first == Stat("ATK", "43.2%")
    assert all(extract_main_stat(lines, HsrSlot.BODY, "hsr") == first for _ in range(5))


@pytest.mark.parametrize(
    "name,value,ok",
    [
        ("Energy Recharge", "51.8%", True),
        ("Energy Recharge", "6.5%", False),
        ("Elemental Mastery", "187", True),
        ("Elemental Mastery", "187%", False),
        ("Elemental Mastery", "23", False),
        ("CRIT Rate", "31.1%", True),
        ("CRIT Rate", "3.9%", False),
        ("CRIT DMG", "62.2%", True),
        ("Healing Bonus", "35.9%", True),
        ("Hydro DMG Bonus", "46.6%", True),
        ("Physical DMG Bonus", "58.3%", True),
        ("ATK", "46.6%", True),
        ("ATK", "311", False),
        ("Effect RES", "5%", False),
    ],
)
def test_gi_plausible_main_bands(name, value, ok):
    assert plausible_gi_main(name, value, GiSlot.SANDS) is ok


def test_plausibility_only_applies_to_variable_gi_slots():
    assert plausible_gi_main("ATK", "19", GiSlot.FLOWER)
    assert plausible_gi_main("ATK", "19", HsrSlot.BODY)
    assert plausible_gi_main("ATK", "19", None)


def test_variable_gi_slot_keeps_top_reading_when_nothing_is_plausible():
    assert extract_main_stat(["ATK 19"], GiSlot.SANDS, "gi") == Stat("ATK", "19")
