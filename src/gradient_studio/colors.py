from __future__ import annotations

import logging
import re
from typing import Callable

from coloraide import Color

log = logging.getLogger(__name__)

Hex = str
ColorParser = Callable[[str], str]

HEX_RE = re.compile(r"#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})")
FALLBACK_HEX: Hex = "#000000"

FIT_HEX = {"method": "raytrace"}  # consistent gamut-fit for hex output


def is_hex(s: str) -> bool:
    return bool(HEX_RE.fullmatch(s))


def coloraide_parser(s: str) -> Hex:
    """Resolve any CSS colour expression (named, rgb(), hsl(), oklch(), ...) to hex.

    Alpha is dropped and out-of-gamut colours are fitted into sRGB.
    """
    return Color(s.strip()).convert("srgb").to_string(hex=True, alpha=False, fit=FIT_HEX)


def normalize(color: str, parser: ColorParser | None = None) -> Hex:
    """Coerce a CSS colour to hex; never raises.

    3- and 6-digit hex input is returned untouched (3-digit is not expanded).
    Anything else goes through ``parser`` and ends up as ``#rrggbb`` or,
    when it cannot be resolved, ``#000000``.
    """
    if isinstance(color, str) and is_hex(color):
        return color
    parse = parser or coloraide_parser
    try:
        out = parse(color)
    except Exception as exc:
        log.debug("could not resolve colour %r: %s", color, exc)
        return FALLBACK_HEX
    if not isinstance(out, str) or not is_hex(out):
        return FALLBACK_HEX
    return out


def hex_to_rgb01(hex_str: Hex) -> tuple[float, float, float]:
    """sRGB coordinates in [0, 1] for a 3- or 6-digit hex colour."""
    r, g, b = Color(hex_str).convert("srgb").coords()
    return float(r), float(g), float(b)


__all__ = ["HEX_RE", "FALLBACK_HEX", "ColorParser", "coloraide_parser", "hex_to_rgb01", "is_hex", "normalize"]
