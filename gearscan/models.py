"""Records shared across the pipeline.

One record shape per game: a ``GearItem`` carries the game it was parsed for
and its slot must come from that game's slot enum.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Game(str, Enum):
    GI = "gi"
    HSR = "hsr"

    @classmethod
    def parse(cls, value: Union[str, "Game"]) -> "Game":
        if isinstance(value, Game):
            return value
        key = str(value or "").strip().lower()
        for game in cls:
            if game.value == key:
                return game
        raise ValueError(f"Unknown game '{value}'. Supported: gi, hsr")


class GiSlot(str, Enum):
    FLOWER = "Flower"
    PLUME = "Plume"
    SANDS = "Sands"
    GOBLET = "Goblet"
    CIRCLET = "Circlet"


class HsrSlot(str, Enum):
    HEAD = "Head"
    HANDS = "Hands"
    BODY = "Body"
    FEET = "Feet"
    PLANAR_SPHERE = "Planar Sphere"
    LINK_ROPE = "Link Rope"


Slot = Union[GiSlot, HsrSlot]

SLOT_TYPES = {Game.GI: GiSlot, Game.HSR: HsrSlot}
DEFAULT_SLOTS = {Game.GI: GiSlot.CIRCLET, Game.HSR: HsrSlot.BODY}


def slots_for(game: Game) -> List[Slot]:
    return list(SLOT_TYPES[Game.parse(game)])


def parse_slot(game: Game, value: str) -> Slot:
    slot_type = SLOT_TYPES[Game.parse(game)]
    key = str(value or "").strip().lower().replace("_", " ")
    for slot in slot_type:
        if slot.value.lower() == key or slot.name.lower().replace("_", " ") == key:
            return slot
    raise ValueError(f"Unknown {Game.parse(game).value} slot '{value}'")


@dataclass(frozen=True)
class Stat:
    name: str
    value: str

    def same_as(self, other: Optional["Stat"]) -> bool:
        if other is None:
            return False
        return self.name.lower() == other.name.lower() and self.value == other.value

    def __str__(self) -> str:
        return f"{self.name} {self.value}"


@dataclass(frozen=True)
class GearItem:
    game: Game
    slot: Slot
    set_name: Optional[str] = None
    main_stat: Optional[Stat] = None
    substats: Tuple[Stat, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.slot, SLOT_TYPES[self.game]):
            raise ValueError(f"Slot {self.slot!r} does not belong to game '{self.game.value}'")
        if not isinstance(self.substats, tuple):
            object.__setattr__(self, "substats", tuple(self.substats))

    def stats(self) -> List[Stat]:
        out = [self.main_stat] if self.main_stat else []
        out.extend(self.substats)
        return out

    def to_dict(self) -> Dict[str, object]:
        return {
            "game": self.game.value,
            "slot": self.slot.value,
            "set_name": self.set_name,
            "main_stat": (
                {"name": self.main_stat.name, "value": self.main_stat.value}
                if self.main_stat
                else None
            ),
            "substats": [{"name": s.name, "value": s.value} for s in self.substats],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "GearItem":
        game = Game.parse(str(data.get("game")))
        main = data.get("main_stat")
        return cls(
            game=game,
            slot=parse_slot(game, str(data.get("slot"))),
            set_name=data.get("set_name") or None,
            main_stat=Stat(str(main["name"]), str(main["value"])) if isinstance(main, dict) else None,
            substats=tuple(
                Stat(str(s["name"]), str(s["value"]))
                for s in data.get("substats") or []
                if isinstance(s, dict)
            ),
        )


@dataclass(frozen=True)
class SetCatalogEntry:
    display_name: str
    short_id: str = ""
    kind: str = ""


@dataclass
class BaseStats:
    character_name: str
    hp: float = 0.0
    atk: float = 0.0
    def_: float = 0.0
    em: float = 0.0
    er_pct: float = 0.0
    cr_pct: float = 0.0
    cd_pct: float = 0.0
    dmg_bonus: Dict[str, float] = field(default_factory=dict)  # bucket key -> percent


class Totals:
    """Bucket -> running sum. Only ever grown by ``add``."""

    def __init__(self) -> None:
        self._sums: Dict[str, Decimal] = {}

    def add(self, key: str, amount) -> None:
        amount = Decimal(str(amount))
        if amount < 0:
            raise ValueError("Totals only accept non-negative contributions")
        self._sums[key] = self._sums.get(key, Decimal(0)) + amount

    def get(self, key: str) -> float:
        return float(self._sums.get(key, Decimal(0)))

    def keys(self) -> List[str]:
        return sorted(self._sums)

    def as_dict(self) -> Dict[str, float]:
        return {key: float(self._sums[key]) for key in sorted(self._sums)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Totals):
            return NotImplemented
        mine = {k: v for k, v in self._sums.items() if v != 0}
        theirs = {k: v for k, v in other._sums.items() if v != 0}
        return mine == theirs

    def __repr__(self) -> str:
        return f"Totals({self.as_dict()!r})"
