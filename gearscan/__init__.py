from gearscan.aggregate import aggregate
from gearscan.models import Game, GearItem, Stat
from gearscan.parser import parse_gear

__version__ = "1.0.0"

__all__ = ["Game", "GearItem", "Stat", "aggregate", "parse_gear"]
