"""Slot classification.

The five-slot game is decided by a plain dictionary lookup. The six-slot game
often loses its slot label to OCR, so its slot is the argmax of weighted votes
from several independent signals, with an override for labels that can only
mean one slot.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from gearscan.models import DEFAULT_SLOTS, Game, GiSlot, HsrSlot, Slot
from gearscan.vocab import DMG_BONUS_RE

logger = logging.getLogger(__name__)

GI_SLOT_PHRASES: Tuple[Tuple[str, GiSlot], ...] = (
    ("flower of life", GiSlot.FLOWER),
    ("plume of death", GiSlot.PLUME),
    ("sands of eon", GiSlot.SANDS),
    ("goblet of eonothem", GiSlot.GOBLET),
    ("circlet of logos", GiSlot.CIRCLET),
    ("ดอกไม้", GiSlot.FLOWER),
    ("ขนนก", GiSlot.PLUME),
    ("ทราย", GiSlot.SANDS),
    ("ถ้วย", GiSlot.GOBLET),
    ("มงกุฎ", GiSlot.CIRCLET),
)
GI_FLOWER_VALUE = re.compile(r"(?<![\d.,])4,?780(?![\d.,%])")
GI_PLUME_VALUE = re.compile(r"(?<![\d.,])311(?![\d.,%])")

HSR_SLOT_PHRASES: Tuple[Tuple[str, HsrSlot], ...] = (
    ("head", HsrSlot.HEAD),
    ("hands", HsrSlot.HANDS),
    ("body", HsrSlot.BODY),
    ("feet", HsrSlot.FEET),
    ("planar sphere", HsrSlot.PLANAR_SPHERE),
    ("link rope", HsrSlot.LINK_ROPE),
    ("ศีรษะ", HsrSlot.HEAD),
    ("หัว", HsrSlot.HEAD),
    ("มือ", HsrSlot.HANDS),
    ("ลำตัว", HsrSlot.BODY),
    ("เท้า", HsrSlot.FEET),
    ("ทรงกลมแผนภาพ", HsrSlot.PLANAR_SPHERE),
    ("ทรงกลม", HsrSlot.PLANAR_SPHERE),
    ("เชือก", HsrSlot.LINK_ROPE),
    ("โซ่", HsrSlot.LINK_ROPE),
)
FORCED_PHRASES: Tuple[Tuple[HsrSlot, Tuple[str, ...]], ...] = (
    (HsrSlot.PLANAR_SPHERE, ("planar sphere", "ทรงกลมแผนภาพ", "ทรงกลม")),
    (HsrSlot.LINK_ROPE, ("link rope", "เชือก", "โซ่")),
)
HSR_TIE_ORDER = (
    HsrSlot.PLANAR_SPHERE,
    HsrSlot.LINK_ROPE,
    HsrSlot.FEET,
    HsrSlot.HEAD,
    HsrSlot.HANDS,
    HsrSlot.BODY,
)
FIXED_MAGNITUDES: Tuple[Tuple[re.Pattern, HsrSlot], ...] = (
    (re.compile(r"\bHP\s*:?\s*705(?![\d.%])", re.I), HsrSlot.HEAD),
    (re.compile(r"\bATK\s*:?\s*352(?![\d.%])", re.I), HsrSlot.HANDS),
    (re.compile(r"\bSPD\s*:?\s*25(?![\d.%])", re.I), HsrSlot.FEET),
)
SPD_RE = re.compile(r"\bSPD\b", re.I)
BREAK_EFFECT_RE = re.compile(r"\bBreak\s*Effect\b", re.I)


@dataclass(frozen=True)
class VoteWeights:
    """Per-signal weights for the six-slot voting classifier."""

    translated_phrase: int = 3
    raw_phrase: int = 5
    header_label: int = 8
    fixed_magnitude: int = 4
    spd: int = 1
    break_effect: int = 7
    dmg_bonus: int = 7


DEFAULT_WEIGHTS = VoteWeights()


def _phrase_regex(phrase: str) -> re.Pattern:
    # Latin labels need word edges ('head' must not fire on 'header'); Thai has none.
    escaped = r"\s+".join(re.escape(part) for part in phrase.split())
    if phrase.isascii():
        return re.compile(rf"\b{escaped}\b", re.I)
    return re.compile(escaped)


_HSR_PHRASE_RES = tuple((_phrase_regex(p), slot) for p, slot in HSR_SLOT_PHRASES)
_FORCED_RES = tuple(
    (slot, tuple(_phrase_regex(p) for p in phrases)) for slot, phrases in FORCED_PHRASES
)
_HEADER_RES = tuple(
    (re.compile(rf"{_phrase_regex(p).pattern}\s*\+\s*\d{{1,2}}(?!\d)", re.I), slot)
    for p, slot in HSR_SLOT_PHRASES
)


def classify_gi(lines_en: Iterable[str]) -> GiSlot:
    joined = " ".join(lines_en).lower()
    for phrase, slot in GI_SLOT_PHRASES:
        if phrase in joined:
            return slot
    if GI_FLOWER_VALUE.search(joined):
        return GiSlot.FLOWER
    if GI_PLUME_VALUE.search(joined):
        return GiSlot.PLUME
    return DEFAULT_SLOTS[Game.GI]


def forced_hsr_slot(lines_en: Iterable[str], raw_lines: Iterable[str]) -> Optional[HsrSlot]:
    text = " ".join(list(raw_lines) + list(lines_en))
    for slot, patterns in _FORCED_RES:
        if any(p.search(text) for p in patterns):
            return slot
    return None


def vote_slots(
    lines_en: List[str],
    raw_lines: List[str],
    weights: VoteWeights = DEFAULT_WEIGHTS,
) -> Dict[HsrSlot, int]:
    """Accumulate per-slot scores from every voting signal (no forced override)."""
    scores = {slot: 0 for slot in HsrSlot}
    joined_en = " ".join(lines_en)
    joined_raw = " ".join(raw_lines)

    for text, weight in ((joined_en, weights.translated_phrase), (joined_raw, weights.raw_phrase)):
        hit = {slot for pattern, slot in _HSR_PHRASE_RES if pattern.search(text)}
        for slot in hit:
            scores[slot] += weight

    headers = set()
    for line in list(raw_lines) + list(lines_en):
        for pattern, slot in _HEADER_RES:
            if pattern.search(line):
                headers.add(slot)
    for slot in headers:
        scores[slot] += weights.header_label

    for pattern, slot in FIXED_MAGNITUDES:
        if pattern.search(joined_en):
            scores[slot] += weights.fixed_magnitude

    if SPD_RE.search(joined_en):
        scores[HsrSlot.FEET] += weights.spd
    if BREAK_EFFECT_RE.search(joined_en):
        scores[HsrSlot.LINK_ROPE] += weights.break_effect
    if DMG_BONUS_RE.search(joined_en):
        scores[HsrSlot.PLANAR_SPHERE] += weights.dmg_bonus
    return scores


def pick_hsr(scores: Dict[HsrSlot, int]) -> HsrSlot:
    best = max(scores.values(), default=0)
    if best <= 0:
        return DEFAULT_SLOTS[Game.HSR]
    for slot in HSR_TIE_ORDER:
        if scores.get(slot, 0) == best:
            return slot
    return DEFAULT_SLOTS[Game.HSR]


def classify_hsr(
    lines_en: List[str],
    raw_lines: List[str],
    weights: VoteWeights = DEFAULT_WEIGHTS,
) -> HsrSlot:
    forced = forced_hsr_slot(lines_en, raw_lines)
    if forced is not None:
        logger.debug("slot forced by label: %s", forced.value)
        return forced
    scores = vote_slots(lines_en, raw_lines, weights)
    slot = pick_hsr(scores)
    logger.debug("slot votes %s -> %s", {s.value: v for s, v in scores.items() if v}, slot.value)
    return slot


def classify_slot(
    lines_en: List[str],
    raw_lines: List[str],
    game: Game,
    weights: Optional[VoteWeights] = None,
) -> Slot:
    if Game.parse(game) is Game.GI:
        return classify_gi(lines_en)
    return classify_hsr(lines_en, raw_lines, weights or DEFAULT_WEIGHTS)
