import re
from typing import List

THAI_DIGITS = "๐๑๒๓๔๕๖๗๘๙"
BULLET = "•"

_DIGIT_TABLE = str.maketrans({thai: str(i) for i, thai in enumerate(THAI_DIGITS)})
_GLYPH_TABLE = str.maketrans(
    {
        "％": "%",
        "﹪": "%",
        "“": '"',
        "”": '"',
        "‘": "'",
        "’": "'",
        "，": ",",
        "、": ",",
        "\u200b": None,
        "·": BULLET,
        "●": BULLET,
        "○": BULLET,
        "・": BULLET,
        "*": BULLET,
    }
)
_SPACE_BEFORE_PERCENT = re.compile(r"\s+%")
_HORIZONTAL_SPACE = re.compile(r"[ \t\f\v\u00a0]+")
_LINE_BREAK = re.compile(r"\r?\n|\r")


def to_arabic_digits(text: str) -> str:
    return (text or "").translate(_DIGIT_TABLE)


def normalize_glyphs(text: str) -> str:
    """Digits, percent signs, quotes, commas and bullets to one canonical form each."""
    text = to_arabic_digits(text).translate(_GLYPH_TABLE)
    return _SPACE_BEFORE_PERCENT.sub("%", text)


def collapse_spaces(line: str) -> str:
    return _HORIZONTAL_SPACE.sub(" ", line).strip()


def normalize_lines(raw: str) -> List[str]:
    lines = []
    for line in _LINE_BREAK.split(normalize_glyphs(raw or "")):
        cleaned = _SPACE_BEFORE_PERCENT.sub("%", collapse_spaces(line))
        if cleaned:
            lines.append(cleaned)
    return lines
