import re
from decimal import Decimal, InvalidOperation


_NUMBER_PREFIX = re.compile(r"\d+(?:\.\d+)?")
_CLEAN_VALUE = re.compile(r"^\d+(?:\.\d+)?%?$")
_NON_WORD = re.compile(r"[^0-9a-z\u0e00-\u0e7f]+")


def clean_value(value: str) -> str:
    """Return a stat value as digits with an optional trailing '%'.

    Commas and whitespace are dropped. Trailing OCR debris such as '7.' or
    '3.1.4' is cut back to the longest leading number.
    """
    text = re.sub(r"[,\s]+", "", str(value or ""))
    percent = "%" in text
    text = text.replace("%", "")
    if not _CLEAN_VALUE.match(text):
        match = _NUMBER_PREFIX.match(text)
        text = match.group(0) if match else "0"
    return text + ("%" if percent else "")


def value_number(value: str) -> Decimal:
    try:
        return Decimal(clean_value(value).rstrip("%"))
    except InvalidOperation:
        return Decimal(0)


def is_percent(value: str) -> bool:
    return str(value or "").strip().endswith("%")


def compress_name(value: str) -> str:
    """Lower-case and drop everything but ASCII alphanumerics and Thai script."""
    return _NON_WORD.sub("", (value or "").lower())


def slug(value: str) -> str:
    value = (value or "").lower()
    value = re.sub(r"[^a-z0-9]+", "-", value).strip("-")
    if not value:
        value = "gear"
    return value[:120]
