"""Canonical stat names and the regex families every extractor shares."""
import re

GI_ELEMENTS = ("Pyro", "Hydro", "Electro", "Cryo", "Anemo", "Geo", "Dendro")
HSR_ELEMENTS = ("Fire", "Ice", "Lightning", "Wind", "Quantum", "Imaginary")

STAT_NAMES = (
    "HP",
    "ATK",
    "DEF",
    "Elemental Mastery",
    "Energy Recharge",
    "CRIT Rate",
    "CRIT DMG",
    "Healing Bonus",
    *(f"{element} DMG Bonus" for element in GI_ELEMENTS),
    "Physical DMG Bonus",
    "Effect Hit Rate",
    "Effect RES",
    "SPD",
    "Break Effect",
    "Energy Regeneration Rate",
    "Outgoing Healing Boost",
    *(f"{element} DMG Boost" for element in HSR_ELEMENTS),
    "Physical DMG Boost",
)

DMG_BONUS_RE = re.compile(
    r"\b(?:%s|Physical)\s+DMG\s+(?:Bonus|Boost)\b" % "|".join(GI_ELEMENTS + HSR_ELEMENTS),
    re.I,
)
IMPORTANT_RE = re.compile(
    r"(DMG Bonus|DMG Boost|CRIT|Recharge|Mastery|Effect|Break|SPD|Healing|Regeneration)",
    re.I,
)
BULLET_START = re.compile(r"^\s*[•\-·●○・*]")
LEVEL_MARKER = re.compile(r"^\+?\s*20\b")

# Longest first so 'Energy Regeneration Rate' is never cut short.
_ALTERNATION = "|".join(
    name.replace(" ", r"\s+") for name in sorted(STAT_NAMES, key=len, reverse=True)
)
_VALUE = r"[0-9][\d,.]*\s*%?"

NAME_WORD_RE = re.compile(rf"\b({_ALTERNATION})\b", re.I)
NAME_FIRST_RE = re.compile(rf"\b({_ALTERNATION})\b\s*:?\s*({_VALUE})", re.I)
VALUE_FIRST_RE = re.compile(rf"({_VALUE})\s*\b({_ALTERNATION})\b", re.I)
NUMBER_RE = re.compile(rf"({_VALUE})")

SUB_NAME_FIRST_RE = re.compile(rf"({_ALTERNATION})\s*\+?\s*({_VALUE})", re.I)
SUB_VALUE_FIRST_RE = re.compile(rf"\+?\s*({_VALUE})\s*({_ALTERNATION})", re.I)
SUB_NAME_ONLY_RE = re.compile(rf"^({_ALTERNATION})$", re.I)
PURE_NUMBER_RE = re.compile(r"^\+?\s*[0-9][\d,.]*\s*%?\s*$")

_CANONICAL = {name.lower(): name for name in STAT_NAMES}


def canonical_name(matched: str) -> str:
    """Map a regex hit like 'crit  rate' back to its canonical spelling."""
    key = re.sub(r"\s+", " ", matched or "").strip().lower()
    return _CANONICAL.get(key, re.sub(r"\s+", " ", matched or "").strip())


def strip_bullet(line: str) -> str:
    return BULLET_START.sub("", line, count=1).strip()
