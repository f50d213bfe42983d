from __future__ import annotations

from typing import Iterable

from .colors import ColorParser, normalize
from .model import GradientDescription, GradientStop, Number


def fmt_number(v: Number) -> str:
    # 45.0 -> "45", 12.5 -> "12.5"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def hex_stops(stops: Iterable[GradientStop], parser: ColorParser | None = None) -> list[GradientStop]:
    """Same stops, same order, every colour normalized to hex."""
    return [GradientStop(color=normalize(s.color, parser), position=s.position) for s in stops]


def compile_gradient(desc: GradientDescription, parser: ColorParser | None = None) -> str:
    """Compile a description into a CSS ``background`` image value.

    Stops keep their input order. An unknown kind falls back to the linear form.
    """
    stop_list = ", ".join(
        f"{s.color} {fmt_number(s.position)}%" for s in hex_stops(desc.stops, parser)
    )
    direction = fmt_number(desc.direction)

    if desc.kind == "radial":
        return f"radial-gradient(circle, {stop_list})"
    if desc.kind == "conic":
        return f"conic-gradient(from {direction}deg, {stop_list})"
    return f"linear-gradient({direction}deg, {stop_list})"


def css_declaration(desc: GradientDescription, parser: ColorParser | None = None) -> str:
    """The copy-to-clipboard form: ``background: <gradient>;``."""
    return f"background: {compile_gradient(desc, parser)};"


__all__ = ["compile_gradient", "css_declaration", "fmt_number", "hex_stops"]
