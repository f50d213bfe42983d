from __future__ import annotations

from typing import Mapping

import numpy as np

from .model import KINDS, GradientDescription, GradientStop

PALETTE: tuple[str, ...] = (
    "#ff6b6b",
    "#4ecdc4",
    "#45b7d1",
    "#96ceb4",
    "#feca57",
    "#ff9ff3",
    "#54a0ff",
    "#5f27cd",
    "#ff3838",
    "#2ed573",
    "#3742fa",
    "#f368e0",
    "#ffa726",
    "#26de81",
    "#a55eea",
)

FALLBACK_STOPS: tuple[GradientStop, ...] = (
    GradientStop("#667eea", 0),
    GradientStop("#764ba2", 100),
)

PRESETS: Mapping[str, GradientDescription] = {
    "Sunset": GradientDescription(
        kind="linear",
        direction=45,
        stops=(
            GradientStop("#ff6b6b", 0),
            GradientStop("#feca57", 50),
            GradientStop("#ff9ff3", 100),
        ),
    ),
    "Ocean": GradientDescription(kind="linear", direction=135, stops=FALLBACK_STOPS),
    "Forest": GradientDescription(
        kind="radial",
        direction=0,
        stops=(GradientStop("#56ab2f", 0), GradientStop("#a8e6cf", 100)),
    ),
}


def preset_names() -> tuple[str, ...]:
    return tuple(PRESETS)


def preset(name: str) -> GradientDescription:
    """Catalog lookup by name, case-insensitive; KeyError if absent."""
    for key, desc in PRESETS.items():
        if key.lower() == name.strip().lower():
            return desc
    raise KeyError(name)


def random_gradient(rng: np.random.Generator | None = None) -> GradientDescription:
    """2-4 palette stops, first at 0 and last at 100, sorted by position."""
    if rng is None:
        rng = np.random.default_rng()

    kind = KINDS[int(rng.integers(len(KINDS)))]
    direction = int(rng.integers(0, 360))
    n = int(rng.integers(2, 5))

    stops: list[GradientStop] = []
    for i in range(n):
        color = PALETTE[int(rng.integers(len(PALETTE)))]
        if i == 0:
            position = 0
        elif i == n - 1:
            position = 100
        else:
            position = int(rng.integers(10, 90))
        stops.append(GradientStop(color, position))

    stops.sort(key=lambda s: s.position)
    return GradientDescription(kind=kind, direction=direction, stops=tuple(stops))


def fallback_gradient(rng: np.random.Generator | None = None) -> GradientDescription:
    """Fixed two-stop linear gradient used when the AI path fails server-side."""
    if rng is None:
        rng = np.random.default_rng()
    return GradientDescription(kind="linear", direction=int(rng.integers(0, 360)), stops=FALLBACK_STOPS)


__all__ = ["PALETTE", "PRESETS", "fallback_gradient", "preset", "preset_names", "random_gradient"]
