from typing import List, Optional

from gearscan.models import Stat
from gearscan.utils import clean_value
from gearscan.vocab import (
    BULLET_START,
    PURE_NUMBER_RE,
    SUB_NAME_FIRST_RE,
    SUB_NAME_ONLY_RE,
    SUB_VALUE_FIRST_RE,
    canonical_name,
    strip_bullet,
)

SCAN_WINDOW = 20
MAX_SUBSTATS = 8


def first_bullet(lines: List[str]) -> int:
    for i, line in enumerate(lines):
        if BULLET_START.match(line):
            return i
    return 0


def unique_stats(stats: List[Stat], limit: int = MAX_SUBSTATS) -> List[Stat]:
    out: List[Stat] = []
    for stat in stats:
        if any(stat.same_as(seen) for seen in out):
            continue
        out.append(stat)
    return out[:limit]


def extract_substats(lines_en: List[str], main_stat: Optional[Stat]) -> List[Stat]:
    """Read the bulleted block under the main stat.

    Anything equal to ``main_stat`` is dropped so the main line never shows up
    twice. Repeats keep their first position.
    """
    lines = list(lines_en)
    start = first_bullet(lines)
    found: List[Stat] = []

    def push(name: str, value: str) -> None:
        stat = Stat(canonical_name(name), clean_value(value))
        if stat.same_as(main_stat):
            return
        found.append(stat)

    for i in range(start, min(len(lines), start + SCAN_WINDOW)):
        line = strip_bullet(lines[i])
        if not line:
            continue
        m = SUB_NAME_FIRST_RE.search(line)
        if m:
            push(m.group(1), m.group(2))
            continue
        m = SUB_VALUE_FIRST_RE.search(line)
        if m:
            push(m.group(2), m.group(1))
            continue
        name_only = SUB_NAME_ONLY_RE.match(line)
        if name_only and i + 1 < len(lines):
            following = strip_bullet(lines[i + 1])
            if PURE_NUMBER_RE.match(following):
                push(name_only.group(1), following.lstrip("+"))
    return unique_stats(found)
