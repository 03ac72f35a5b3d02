"""Colour helpers: RGB <-> hex conversion and WCAG contrast."""

from collections.abc import Mapping

from PIL import ImageColor

from qrframe.errors import InvalidColor


def _channel(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
        raise InvalidColor(f"channel value {value!r} outside 0-255")
    return value


def to_hex(r: int, g: int, b: int) -> str:
    """Format an RGB triple as ``#rrggbb``."""
    return "#" + "".join(f"{_channel(ch):02x}" for ch in (r, g, b))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#rrggbb`` (with or without '#') to an RGB tuple."""
    s = value.lstrip("#")
    if len(s) != 6:
        raise InvalidColor(f"expected six hex digits, got {value!r}")
    try:
        return tuple(int(s[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError as exc:
        raise InvalidColor(f"invalid hex colour {value!r}") from exc


def parse_color(value) -> str:
    """Normalise a user colour to ``#rrggbb``.

    Accepts colour strings understood by Pillow (``#rgb``, ``#rrggbb``, names),
    ``(r, g, b[, a])`` sequences, and ``{"r":..,"g":..,"b":..}`` records,
    optionally nested under ``"rgba"``.
    """
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as exc:
            raise InvalidColor(f"unrecognised colour {value!r}") from exc
        return to_hex(*rgb[:3])
    if isinstance(value, Mapping):
        record = value.get("rgba", value)
        try:
            return to_hex(record["r"], record["g"], record["b"])
        except (KeyError, TypeError) as exc:
            raise InvalidColor(f"colour record needs r, g, b: {value!r}") from exc
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        return to_hex(*value[:3])
    raise InvalidColor(f"unsupported colour value {value!r}")


def _linearize(channel: int) -> float:
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def _luminance(rgb: tuple[int, int, int]) -> float:
    """Relative luminance per WCAG 2.0."""
    r, g, b = [_linearize(ch) for ch in rgb]
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(fg: str | tuple, bg: str | tuple) -> float:
    """WCAG contrast ratio between two colours (1.0 - 21.0)."""
    l1 = _luminance(hex_to_rgb(parse_color(fg)))
    l2 = _luminance(hex_to_rgb(parse_color(bg)))
    if l1 < l2:
        l1, l2 = l2, l1
    return (l1 + 0.05) / (l2 + 0.05)
