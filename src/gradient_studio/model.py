from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Mapping, Sequence

from .errors import ParseError

Number = float | int

KINDS: tuple[str, ...] = ("linear", "radial", "conic")


@dataclass(frozen=True)
class GradientStop:
    color: str
    position: Number

    def to_dict(self) -> dict[str, Any]:
        return {"color": self.color, "position": self.position}


@dataclass(frozen=True)
class GradientDescription:
    """A CSS gradient: kind, direction in degrees and ordered colour stops.

    Instances are never edited in place; the ``with_*`` helpers return a new
    description with one field swapped out.
    """

    kind: str
    direction: Number
    stops: tuple[GradientStop, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # accept any sequence of stops but keep the stored value hashable
        if not isinstance(self.stops, tuple):
            object.__setattr__(self, "stops", tuple(self.stops))

    def with_kind(self, kind: str) -> GradientDescription:
        return replace(self, kind=kind)

    def with_direction(self, direction: Number) -> GradientDescription:
        return replace(self, direction=direction)

    def with_stop(self, index: int, **changes: Any) -> GradientDescription:
        stops = list(self.stops)
        stops[index] = replace(stops[index], **changes)
        return replace(self, stops=tuple(stops))

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "direction": self.direction,
            "stops": [s.to_dict() for s in self.stops],
        }

    @classmethod
    def from_dict(cls, data: Any) -> GradientDescription:
        """Validate a decoded JSON object and build a description from it.

        The legacy wire key ``type`` is accepted in place of ``kind``.
        Raises ParseError when the shape or value types are wrong.
        """
        if not isinstance(data, Mapping):
            raise ParseError("gradient must be a JSON object")

        kind = data.get("kind", data.get("type"))
        if not isinstance(kind, str) or kind not in KINDS:
            raise ParseError(f"kind must be one of {', '.join(KINDS)}")

        direction = data.get("direction")
        if not _is_number(direction):
            raise ParseError("direction must be a number")

        raw_stops = data.get("stops")
        if not isinstance(raw_stops, Sequence) or isinstance(raw_stops, (str, bytes)):
            raise ParseError("stops must be a list")
        if not raw_stops:
            raise ParseError("stops must not be empty")

        return cls(kind=kind, direction=direction, stops=tuple(_stop(s) for s in raw_stops))


def _is_number(v: Any) -> bool:
    # finite only: json.loads lets NaN, Infinity and huge literals through
    if not isinstance(v, Real) or isinstance(v, bool):
        return False
    try:
        return math.isfinite(float(v))
    except OverflowError:
        return False


def _stop(raw: Any) -> GradientStop:
    if not isinstance(raw, Mapping):
        raise ParseError("each stop must be an object")
    color = raw.get("color")
    position = raw.get("position")
    if not isinstance(color, str):
        raise ParseError("stop color must be a string")
    if not _is_number(position):
        raise ParseError("stop position must be a number")
    return GradientStop(color=color, position=position)


__all__ = ["KINDS", "GradientStop", "GradientDescription"]
