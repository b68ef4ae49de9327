import math
import re

COLOR_PATTERN = re.compile(r"^[#a-zA-Z0-9(),.%\s-]+$")
MARKUP_CHARS = re.compile(r"[<>\"'&]")

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}


def parse_number(value: object) -> float | None:
    """Parse a query or body value into a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def escape_xml(value: object) -> str:
    return "".join(_XML_ESCAPES.get(ch, ch) for ch in str(value))


def sanitize_color(value: object) -> str | None:
    """Return the colour if it is safe to embed in an SVG attribute."""
    trimmed = str(value or "").strip()
    if not trimmed:
        return None
    if MARKUP_CHARS.search(trimmed):
        return None
    if not COLOR_PATTERN.match(trimmed):
        return None
    return trimmed


def clamp_int(value: object, fallback: int, minimum: int, maximum: int) -> int:
    number = parse_number(value)
    if number is None:
        return fallback
    # half-up, like the query values clients were built against
    rounded = math.floor(number + 0.5)
    return max(minimum, min(maximum, rounded))


def clamp_float(value: object, fallback: float, minimum: float, maximum: float) -> float:
    number = parse_number(value)
    if number is None:
        return fallback
    return max(minimum, min(maximum, number))


def format_number(value: float) -> str:
    """Render a number for SVG output without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def is_truthy(value: object) -> bool:
    if value is None:
        return False
    return str(value).strip().lower() not in ("", "0", "false", "no", "off")
