"""One OCR transcription in, one ``GearItem`` out."""
import logging
from typing import Iterable, List, Optional, Union

from gearscan.mainstat import extract_main_stat
from gearscan.models import Game, GearItem, SetCatalogEntry
from gearscan.normalize import normalize_lines
from gearscan.sets import SetResolver, resolve_set_name
from gearscan.slots import VoteWeights, classify_slot
from gearscan.substats import extract_substats
from gearscan.translate import translate_lines

logger = logging.getLogger(__name__)

SetSource = Union[SetResolver, Iterable[SetCatalogEntry], None]


def _resolve_set(raw: str, game: Game, sets: SetSource) -> Optional[str]:
    if sets is None:
        return None
    if isinstance(sets, SetResolver):
        return sets.resolve(raw, game)
    return resolve_set_name(raw, sets)


def parse_gear(
    raw: str,
    game: Union[str, Game],
    sets: SetSource = None,
    weights: Optional[VoteWeights] = None,
) -> GearItem:
    """Run the full pipeline over ``raw``.

    ``sets`` is either a ``SetResolver`` or a list of catalog entries. Without
    one the set name stays ``None``.
    """
    game = Game.parse(game)
    raw_lines = normalize_lines(raw)
    lines_en = translate_lines(raw_lines, game)

    slot = classify_slot(lines_en, raw_lines, game, weights)
    main_stat = extract_main_stat(lines_en, slot, game)
    substats = extract_substats(lines_en, main_stat)
    set_name = _resolve_set("\n".join(raw_lines + lines_en), game, sets)

    item = GearItem(
        game=game,
        slot=slot,
        set_name=set_name,
        main_stat=main_stat,
        substats=tuple(substats),
    )
    logger.debug("parsed %s %s main=%s subs=%d", game.value, slot.value, main_stat, len(substats))
    return item


def describe_item(item: GearItem, shown_substats: int = 4) -> List[str]:
    lines = [
        f"Set: {item.set_name or '(unreadable)'}",
        f"Piece: {item.slot.value}",
        f"Main: {item.main_stat or '-'}",
    ]
    subs = item.substats[:shown_substats]
    if subs:
        lines.append("Substats:")
        lines.extend(f"  - {stat}" for stat in subs)
    else:
        lines.append("Substats: -")
    return lines
