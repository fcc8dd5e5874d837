"""Main-stat extraction.

Candidates are collected from the card header (everything above the first
substat bullet or the ``+20`` level marker) and from the whole capped range,
then ranked by a score that favours early, unbulleted, plausible readings.
"""
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from gearscan.models import Game, GiSlot, HsrSlot, Slot, Stat
from gearscan.utils import clean_value, is_percent, value_number
from gearscan.vocab import (
    BULLET_START,
    IMPORTANT_RE,
    LEVEL_MARKER,
    NAME_FIRST_RE,
    NAME_WORD_RE,
    NUMBER_RE,
    VALUE_FIRST_RE,
    canonical_name,
)

logger = logging.getLogger(__name__)

FIXED_MAIN_STATS = {
    (Game.GI, GiSlot.FLOWER): Stat("HP", "4780"),
    (Game.GI, GiSlot.PLUME): Stat("ATK", "311"),
    (Game.HSR, HsrSlot.HEAD): Stat("HP", "705"),
    (Game.HSR, HsrSlot.HANDS): Stat("ATK", "352"),
}
GI_VARIABLE_SLOTS = (GiSlot.SANDS, GiSlot.GOBLET, GiSlot.CIRCLET)
HSR_VARIABLE_SLOTS = (HsrSlot.BODY, HsrSlot.FEET, HsrSlot.PLANAR_SPHERE, HsrSlot.LINK_ROPE)

HEAD_LIMIT = 24
SPLIT_LOOKAROUND = 2

HEADER_BONUS = 20
POSITION_WEIGHT = 2
BULLET_SCORE = 16
GI_PCT_BONUS = 6
GI_FLAT_EM_BONUS = 6
GI_FLAT_PENALTY = 8
HSR_PCT_BONUS = 4
LOW_FLAT_CEILING = 60
LOW_FLAT_PENALTY = 4
IMPLAUSIBLE_PENALTY = 30
IMPORTANT_BONUS = 3

_ELEMENTAL = re.compile(r"(Pyro|Hydro|Electro|Cryo|Anemo|Geo|Dendro) DMG Bonus", re.I)
_BASIC = re.compile(r"\b(HP|ATK|DEF)\b", re.I)

# (name pattern, must be percent, low, high), checked in order.
GI_MAIN_BANDS = (
    (re.compile(r"Elemental Mastery", re.I), False, 120, 240),
    (re.compile(r"Energy Recharge", re.I), True, 40, 55),
    (re.compile(r"CRIT Rate", re.I), True, 28, 34),
    (re.compile(r"CRIT DMG", re.I), True, 58, 70),
    (re.compile(r"Healing Bonus", re.I), True, 30, 40),
    (_ELEMENTAL, True, 40, 58),
    (re.compile(r"Physical DMG Bonus", re.I), True, 55, 70),
    (_BASIC, True, 40, 58),
)
SMALL_PCT_FLOOR = 15


@dataclass(frozen=True)
class Candidate:
    name: str
    value: str
    line: int
    bullet: bool
    in_header: bool

    @property
    def stat(self) -> Stat:
        return Stat(self.name, self.value)


def plausible_gi_main(name: str, value: str, slot: Optional[Slot]) -> bool:
    """Whether ``name value`` is a believable main stat for a gi Sands/Goblet/Circlet."""
    if slot not in GI_VARIABLE_SLOTS:
        return True
    pct = is_percent(value)
    number = value_number(value)
    for pattern, want_pct, low, high in GI_MAIN_BANDS:
        if pattern.search(name):
            return pct == want_pct and low <= number <= high
    if pct and number < SMALL_PCT_FLOOR:
        return False
    return True


def header_end(lines: List[str]) -> int:
    for i, line in enumerate(lines):
        if LEVEL_MARKER.match(line) or BULLET_START.match(line):
            return i
    return len(lines)


def collect_candidates(lines: List[str]) -> List[Candidate]:
    head_limit = min(HEAD_LIMIT, len(lines))
    ranges = (
        (0, min(head_limit, header_end(lines)), True),
        (0, head_limit, False),
    )
    found: List[Candidate] = []

    def push(name: str, value: str, i: int, in_header: bool) -> None:
        found.append(
            Candidate(
                name=canonical_name(name),
                value=clean_value(value),
                line=i,
                bullet=bool(BULLET_START.match(lines[i])),
                in_header=in_header,
            )
        )

    for start, end, in_header in ranges:
        for i in range(start, end):
            line = lines[i]
            m = NAME_FIRST_RE.search(line)
            if m:
                push(m.group(1), m.group(2), i, in_header)
                continue
            m = VALUE_FIRST_RE.search(line)
            if m:
                push(m.group(2), m.group(1), i, in_header)
                continue
            if not in_header:
                continue

            name_hit = NAME_WORD_RE.search(line)
            if name_hit:
                for k in range(1, SPLIT_LOOKAROUND + 1):
                    if i + k >= end:
                        break
                    number = NUMBER_RE.search(lines[i + k])
                    if number:
                        push(name_hit.group(1), number.group(1), i, True)
                        break
            number_here = NUMBER_RE.search(line)
            if number_here:
                for k in range(1, SPLIT_LOOKAROUND + 1):
                    if i - k < start:
                        break
                    name_before = NAME_WORD_RE.search(lines[i - k])
                    if name_before:
                        push(name_before.group(1), number_here.group(1), i - k, True)
                        break
    return found


def score_candidate(cand: Candidate, slot: Optional[Slot], game: Game) -> int:
    score = HEADER_BONUS if cand.in_header else 0
    score += max(0, HEAD_LIMIT - cand.line) * POSITION_WEIGHT
    score += -BULLET_SCORE if cand.bullet else BULLET_SCORE

    pct = is_percent(cand.value)
    number = value_number(cand.value)
    is_em = "elemental mastery" in cand.name.lower()
    if game is Game.GI and slot in GI_VARIABLE_SLOTS:
        if pct:
            score += GI_PCT_BONUS
        elif is_em:
            score += GI_FLAT_EM_BONUS
        else:
            score -= GI_FLAT_PENALTY
    if game is Game.HSR and slot in HSR_VARIABLE_SLOTS and pct:
        score += HSR_PCT_BONUS
    if not pct and number <= Decimal(LOW_FLAT_CEILING):
        score -= LOW_FLAT_PENALTY
    if game is Game.GI and not plausible_gi_main(cand.name, cand.value, slot):
        score -= IMPLAUSIBLE_PENALTY
    if IMPORTANT_RE.search(cand.name):
        score += IMPORTANT_BONUS
    return score


def extract_main_stat(lines_en: List[str], slot: Optional[Slot], game: Game) -> Optional[Stat]:
    game = Game.parse(game)
    fixed = FIXED_MAIN_STATS.get((game, slot))
    if fixed is not None:
        return fixed

    candidates = collect_candidates(list(lines_en))
    if not candidates:
        return None

    # sorted() is stable, so equal scores keep scan order.
    ranked = sorted(candidates, key=lambda c: score_candidate(c, slot, game), reverse=True)
    winner = ranked[0]
    if game is Game.GI and slot in GI_VARIABLE_SLOTS:
        plausible = next(
            (c for c in ranked if plausible_gi_main(c.name, c.value, slot)), None
        )
        if plausible is not None:
            winner = plausible
    logger.debug(
        "main stat %s from %d candidates (line %d)", winner.stat, len(candidates), winner.line
    )
    return winner.stat
