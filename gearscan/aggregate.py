"""Loadout totals and threshold-driven build notes."""
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from gearscan.catalog_source import character_key
from gearscan.models import BaseStats, Game, GearItem, Slot, Stat, Totals, slots_for
from gearscan.utils import is_percent, value_number
from gearscan.vocab import GI_ELEMENTS, HSR_ELEMENTS

GI_ELEMENT_BUCKETS = tuple(f"{e.lower()}_pct" for e in GI_ELEMENTS)
HSR_ELEMENT_BUCKETS = tuple(f"{e.lower()}_pct" for e in HSR_ELEMENTS)

_BASIC = re.compile(r"^(hp|atk|def)\b", re.I)
_ELEMENT = re.compile(
    r"^(%s)\s*DMG\b" % "|".join(GI_ELEMENTS + HSR_ELEMENTS), re.I
)
_NAMED_BUCKETS = (
    (re.compile(r"elemental\s*mastery", re.I), "em"),
    (re.compile(r"energy\s*recharge", re.I), "er_pct"),
    (re.compile(r"energy\s*regeneration", re.I), "err_pct"),
    (re.compile(r"crit\s*rate", re.I), "cr_pct"),
    (re.compile(r"crit\s*(?:dmg|damage)", re.I), "cd_pct"),
    (re.compile(r"healing", re.I), "healing_pct"),
    (re.compile(r"physical\s*dmg", re.I), "physical_pct"),
    (re.compile(r"effect\s*hit", re.I), "ehr_pct"),
    (re.compile(r"effect\s*res", re.I), "eres_pct"),
    (re.compile(r"break\s*effect", re.I), "be_pct"),
)

DEFAULT_BASELINES = {
    Game.GI: {"cr_pct": 5, "cd_pct": 50, "er_pct": 100},
    Game.HSR: {"cr_pct": 5, "cd_pct": 50, "err_pct": 100},
}

# Floors compare against totals with the baseline or base record already added.
# ER is read as total ER, the same scale as the gap report and character targets.
GI_CD_FLOOR = 120
GI_CR_FLOOR = 45
GI_ER_FLOOR = 120
HSR_CD_FLOOR = 110
HSR_CR_FLOOR = 45
CRIT_RATIO_LOW = 10
CRIT_RATIO_HIGH = 30

# Character-specific targets; anything not listed uses the role-based defaults.
CHARACTER_TARGETS = {
    "xiangling": {"er": 180, "cr": 70, "cd": 140},
    "bennett": {"er": 180, "cr": 60, "cd": 120},
    "xingqiu": {"er": 220, "cr": 60, "cd": 120},
    "raidenshogun": {"er": 220, "cr": 65, "cd": 130},
    "furina": {"er": 130, "cr": 70, "cd": 140},
    "yelan": {"er": 220, "cr": 60, "cd": 120},
    "neuvillette": {"er": 110, "cr": 65, "cd": 140},
    "nahida": {"er": 120, "em": 800, "cr": 60, "cd": 120},
    "kazuha": {"er": 140, "em": 800, "cr": 0, "cd": 0},
}


@dataclass(frozen=True)
class Note:
    code: str
    message: str


@dataclass
class AggregateResult:
    game: Game
    totals: Totals
    notes: List[Note] = field(default_factory=list)
    base_applied: bool = False
    missing: List[Slot] = field(default_factory=list)
    character: Optional[str] = None

    def note_codes(self) -> List[str]:
        return [note.code for note in self.notes]

    def to_dict(self) -> Dict[str, object]:
        return {
            "game": self.game.value,
            "character": self.character,
            "base_applied": self.base_applied,
            "totals": self.totals.as_dict(),
            "notes": [{"code": n.code, "message": n.message} for n in self.notes],
            "missing": [slot.value for slot in self.missing],
        }


def stat_bucket(name: str, value: str) -> Optional[str]:
    """The single aggregate bucket a stat reading adds to, or None if unknown."""
    name = (name or "").strip()
    pct = is_percent(value) or "%" in name
    basic = _BASIC.match(name)
    if basic:
        return f"{basic.group(1).lower()}_{'pct' if pct else 'flat'}"
    if re.match(r"^spd\b", name, re.I):
        return "spd_pct" if pct else "spd"
    for pattern, bucket in _NAMED_BUCKETS:
        if pattern.search(name):
            return bucket
    element = _ELEMENT.match(name)
    if element:
        return f"{element.group(1).lower()}_pct"
    return None


def _add_stat(totals: Totals, stat: Stat) -> None:
    bucket = stat_bucket(stat.name, stat.value)
    if bucket is not None:
        totals.add(bucket, value_number(stat.value))


def sum_gear(items: Iterable[GearItem]) -> Totals:
    totals = Totals()
    for item in items:
        if item is None:
            continue
        for stat in item.stats():
            _add_stat(totals, stat)
    return totals


def _apply_base(totals: Totals, game: Game, base: BaseStats) -> None:
    er_bucket = "er_pct" if game is Game.GI else "err_pct"
    pairs = (
        ("hp_base", base.hp),
        ("atk_base", base.atk),
        ("def_base", base.def_),
        ("em", base.em),
        (er_bucket, base.er_pct),
        ("cr_pct", base.cr_pct),
        ("cd_pct", base.cd_pct),
    )
    for bucket, amount in pairs:
        if amount > 0:
            totals.add(bucket, amount)
    for bucket, amount in (base.dmg_bonus or {}).items():
        if amount > 0:
            totals.add(bucket, amount)


def _apply_defaults(totals: Totals, game: Game) -> None:
    for bucket, amount in DEFAULT_BASELINES[game].items():
        totals.add(bucket, amount)


def missing_slots(loadout: Mapping[Slot, GearItem], game: Game) -> List[Slot]:
    return [slot for slot in slots_for(game) if loadout.get(slot) is None]


def best_element(totals: Totals, buckets: Iterable[str]):
    best_bucket, best_value = None, 0.0
    for bucket in buckets:
        value = totals.get(bucket)
        if value > best_value:
            best_bucket, best_value = bucket, value
    return best_bucket, best_value


def _gi_notes(totals: Totals, character: Optional[str]) -> List[Note]:
    notes: List[Note] = []
    cr, cd, er = totals.get("cr_pct"), totals.get("cd_pct"), totals.get("er_pct")
    if cd < GI_CD_FLOOR:
        notes.append(Note("crit_dmg_low", f"CRIT DMG {cd:.1f}% is low; look for more CRIT DMG"))
    if cr < GI_CR_FLOOR:
        notes.append(Note("crit_rate_low", f"CRIT Rate {cr:.1f}% is low; try a CRIT circlet or CRIT substats"))
    if er < GI_ER_FLOOR:
        notes.append(Note("energy_recharge_low", f"Energy Recharge {er:.1f}% is low; aim for around 140%"))
    bucket, value = best_element(totals, GI_ELEMENT_BUCKETS)
    if bucket:
        element = bucket[: -len("_pct")].capitalize()
        notes.append(Note("elemental_bonus", f"Main elemental bonus: {element} DMG ~{value:.1f}%"))
    elif totals.get("physical_pct") == 0:
        notes.append(
            Note("no_elemental_bonus", "No elemental or physical bonus yet; use a goblet matching the character")
        )
    ideal_cd = round(cr * 2, 1)
    if not (ideal_cd - CRIT_RATIO_LOW <= cd <= ideal_cd + CRIT_RATIO_HIGH):
        notes.append(Note("crit_ratio_off", f"CRIT ratio is off: ~{ideal_cd:.1f}% CRIT DMG suits {cr:.1f}% CRIT Rate"))
    target = CHARACTER_TARGETS.get(character_key(character or ""))
    if target and er < target["er"]:
        notes.append(
            Note("character_er_target", f"{character} wants about {target['er']}% Energy Recharge (now {er:.1f}%)")
        )
    return notes


def _hsr_notes(totals: Totals) -> List[Note]:
    notes: List[Note] = []
    cr, cd = totals.get("cr_pct"), totals.get("cd_pct")
    if cd < HSR_CD_FLOOR:
        notes.append(Note("crit_dmg_low", f"CRIT DMG {cd:.1f}% is low; look for more CRIT DMG"))
    if cr < HSR_CR_FLOOR:
        notes.append(Note("crit_rate_low", f"CRIT Rate {cr:.1f}% is low; try a CRIT body or CRIT substats"))
    bucket, _ = best_element(totals, HSR_ELEMENT_BUCKETS)
    if bucket is None and totals.get("physical_pct") == 0:
        notes.append(Note("no_elemental_bonus", "No DMG Boost planar sphere yet; use one matching the character"))
    return notes


def aggregate(
    loadout: Mapping[Slot, GearItem],
    base: Optional[BaseStats] = None,
    character: Optional[str] = None,
    game: Optional[Game] = None,
) -> AggregateResult:
    """Sum a loadout, add the base record or the default baseline, then judge it."""
    items = [item for item in loadout.values() if item is not None]
    if game is None:
        if not items:
            raise ValueError("game is required for an empty loadout")
        game = items[0].game
    game = Game.parse(game)

    totals = sum_gear(items)
    if base is not None:
        _apply_base(totals, game, base)
    else:
        _apply_defaults(totals, game)

    notes = _gi_notes(totals, character) if game is Game.GI else _hsr_notes(totals)
    return AggregateResult(
        game=game,
        totals=totals,
        notes=notes,
        base_applied=base is not None,
        missing=missing_slots(loadout, game),
        character=character or (base.character_name if base else None),
    )


def targets_for(character: str, role: Optional[str] = None) -> Dict[str, float]:
    role = (role or "").lower()
    targets = {"er": 160 if ("burst" in role or "off" in role) else 130, "cr": 70, "cd": 140}
    targets.update(CHARACTER_TARGETS.get(character_key(character), {}))
    return targets


def gap_report(character: str, totals: Totals, role: Optional[str] = None) -> Dict[str, object]:
    """Distance from the character's targets for ER, CRIT and (where set) EM."""
    targets = targets_for(character, role)
    current = {
        "er": totals.get("er_pct"),
        "cr": totals.get("cr_pct"),
        "cd": totals.get("cd_pct"),
        "em": totals.get("em"),
    }
    gaps: Dict[str, object] = {}
    for key in ("er", "cr", "cd", "em"):
        if key not in targets:
            continue
        diff = round(targets[key] - current[key], 1)
        gaps[key] = {
            "target": targets[key],
            "current": current[key],
            "diff": diff,
            "status": "ok" if diff <= 0 else "need",
        }
    ideal_cd = round(current["cr"] * 2, 1)
    gaps["crit_ratio"] = {
        "ideal_cd_for_cr": ideal_cd,
        "ratio_ok": ideal_cd - CRIT_RATIO_LOW <= current["cd"] <= ideal_cd + CRIT_RATIO_HIGH,
    }
    return {"targets": targets, "gaps": gaps}


def format_summary(result: AggregateResult) -> List[str]:
    t = result.totals
    if result.game is Game.GI:
        elements = " / ".join(
            f"{b[:-4].capitalize()} {t.get(b):.1f}%" for b in GI_ELEMENT_BUCKETS + ("physical_pct",)
        )
        lines = [
            f"HP {round(t.get('hp_flat'))} | ATK {round(t.get('atk_flat'))} | DEF {round(t.get('def_flat'))}",
            f"EM {round(t.get('em'))} | ER {t.get('er_pct'):.1f}% | CR {t.get('cr_pct'):.1f}% | CD {t.get('cd_pct'):.1f}%",
            f"DMG Bonus: {elements}",
        ]
    else:
        boosts = " / ".join(
            f"{b[:-4].capitalize()} {t.get(b):.1f}%" for b in HSR_ELEMENT_BUCKETS + ("physical_pct",)
        )
        lines = [
            f"HP {round(t.get('hp_flat'))} | ATK {round(t.get('atk_flat'))} | DEF {round(t.get('def_flat'))} | SPD {round(t.get('spd'))}",
            f"CR {t.get('cr_pct'):.1f}% | CD {t.get('cd_pct'):.1f}% | BE {t.get('be_pct'):.1f}% | ERR {t.get('err_pct'):.1f}%",
            f"DMG Boost: {boosts}",
        ]
    if result.missing:
        lines.append("Missing: " + ", ".join(slot.value for slot in result.missing))
    if result.notes:
        lines.extend(f"- {note.message}" for note in result.notes)
    else:
        lines.append("- Looks fine")
    return lines
