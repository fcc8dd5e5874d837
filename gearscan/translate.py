"""Thai stat phrases to canonical English stat names.

OCR inserts stray spaces inside Thai script, so every phrase is compiled into
a pattern that accepts whitespace between any two of its characters.
"""
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern

from gearscan.models import Game
from gearscan.normalize import collapse_spaces, normalize_glyphs


@dataclass(frozen=True)
class Phrase:
    source: str
    target: str
    game: Optional[Game] = None


PHRASES = (
    Phrase("พลังชีวิต", "HP"),
    Phrase("พลังโจมตี", "ATK"),
    Phrase("พลังป้องกัน", "DEF"),
    Phrase("ความชำนาญธาตุ", "Elemental Mastery"),
    Phrase("อัตราการฟื้นฟูพลังงาน", "Energy Recharge"),
    Phrase("การฟื้นฟูพลังงาน", "Energy Recharge"),
    Phrase("อัตราคริติคอล", "CRIT Rate"),
    Phrase("อัตราคริ", "CRIT Rate"),
    Phrase("คริติคอลเรต", "CRIT Rate"),
    Phrase("โอกาสคริ", "CRIT Rate"),
    Phrase("ความแรงคริติคอล", "CRIT DMG"),
    Phrase("ความแรงคริ", "CRIT DMG"),
    Phrase("ดาเมจคริติคอล", "CRIT DMG"),
    Phrase("ดาเมจคริ", "CRIT DMG"),
    Phrase("คริติคอลดาเมจ", "CRIT DMG"),
    Phrase("คริดาเมจ", "CRIT DMG"),
    Phrase("โบนัสการรักษา", "Healing Bonus", Game.GI),
    Phrase("โบนัสการรักษา", "Outgoing Healing Boost", Game.HSR),
    Phrase("โบนัสความเสียหายกายภาพ", "Physical DMG Bonus", Game.GI),
    Phrase("ความเสียหายกายภาพ", "Physical DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายไฟ", "Pyro DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายน้ำ", "Hydro DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายไฟฟ้า", "Electro DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายน้ำแข็ง", "Cryo DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายลม", "Anemo DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายหิน", "Geo DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายหญ้า", "Dendro DMG Bonus", Game.GI),
    Phrase("โบนัสความเสียหายกายภาพ", "Physical DMG Boost", Game.HSR),
    Phrase("ความเสียหายกายภาพ", "Physical DMG Boost", Game.HSR),
    Phrase("โบนัสความเสียหายไฟ", "Fire DMG Boost", Game.HSR),
    Phrase("โบนัสความเสียหายน้ำแข็ง", "Ice DMG Boost", Game.HSR),
    Phrase("โบนัสความเสียหายสายฟ้า", "Lightning DMG Boost", Game.HSR),
    Phrase("โบนัสความเสียหายลม", "Wind DMG Boost", Game.HSR),
    Phrase("โบนัสความเสียหายควอนตัม", "Quantum DMG Boost", Game.HSR),
    Phrase("โบนัสความเสียหายจินตภาพ", "Imaginary DMG Boost", Game.HSR),
    Phrase("อัตราติดเอฟเฟกต์", "Effect Hit Rate"),
    Phrase("ต้านทานเอฟเฟกต์", "Effect RES"),
    Phrase("ต้านทานสถานะ", "Effect RES"),
    Phrase("ความเร็ว", "SPD"),
    Phrase("อัตราการฟื้นพลังงาน", "Energy Regeneration Rate"),
    Phrase("ฟื้นพลังงาน", "Energy Regeneration Rate"),
    Phrase("เอฟเฟกต์ทำลายล้าง", "Break Effect"),
    Phrase("เอฟเฟกต์ทำลาย", "Break Effect"),
    Phrase("ผลการทำลาย", "Break Effect"),
)

_CRIT_DMG_SPLITS = (
    re.compile(r"(?:dmg|ดาเมจ)\s*คริ(?:\s*[ตท]\s*ิ?\s*ค\s*อ\s*ล)?", re.I),
    re.compile(r"คริ\S{0,6}\s*ดาเมจ"),
)
_CRIT_RATE_SPLIT = re.compile(r"อัตรา\s*คริ(?:ติคอล)?", re.I)


def fuzzy_pattern(phrase: str) -> Pattern[str]:
    """Compile ``phrase`` so any amount of whitespace may sit between its characters."""
    chars = [re.escape(ch) for ch in phrase if not ch.isspace()]
    return re.compile(r"\s*".join(chars), re.I)


@lru_cache(maxsize=None)
def _compiled_table(game: Optional[Game]) -> tuple:
    rows = [p for p in PHRASES if p.game is None or game is None or p.game == game]
    if game is None:
        # Without a game, the first row listed for a phrase wins.
        seen = set()
        unique = []
        for row in rows:
            if row.source in seen:
                continue
            seen.add(row.source)
            unique.append(row)
        rows = unique
    rows.sort(key=lambda p: len(p.source), reverse=True)
    return tuple((fuzzy_pattern(p.source), p.target) for p in rows)


def translate_line(line: str, game: Optional[Game] = None) -> str:
    text = normalize_glyphs(line or "")
    # Split CRIT DMG words go first so shorter table rows cannot cut them.
    for pattern in _CRIT_DMG_SPLITS:
        text = pattern.sub(" CRIT DMG ", text)
    for pattern, target in _compiled_table(Game.parse(game) if game else None):
        text = pattern.sub(f" {target} ", text)
    text = _CRIT_RATE_SPLIT.sub("CRIT Rate", text)
    return collapse_spaces(text)


def translate_lines(lines: Iterable[str], game: Optional[Game] = None) -> List[str]:
    return [translate_line(line, game) for line in lines]
