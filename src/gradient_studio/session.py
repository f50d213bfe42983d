from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal

import numpy as np
import requests

from .css import compile_gradient, css_declaration
from .errors import RenderExportError, UpstreamError
from .generators import PRESETS, preset, random_gradient
from .model import GradientDescription, Number
from .raster import ExportResult, export_image

log = logging.getLogger(__name__)

Level = Literal["success", "error"]

AI_OK = "AI gradient generated!"
AI_FAILED = "AI failed to generate a gradient, showing random instead."
CSS_COPIED = "CSS copied!"
EXPORT_OK = "Image downloaded!"
EXPORT_FAILED = "Failed to export image. Try again or check browser permissions."


@dataclass(frozen=True)
class Notice:
    message: str
    level: Level


@dataclass
class GradientSession:
    """Owns the one current gradient of an interactive session.

    Every action swaps ``current`` for a new description. ``notices`` collects
    the advisory messages a UI would show as toasts. ``generate_ai`` talks to
    the ``/api/generate-gradient`` endpoint at ``api_url`` and is gated by
    ``busy``: a call made while another is outstanding is dropped.
    """

    api_url: str = "http://127.0.0.1:5000/api/generate-gradient"
    http: Any = None
    rng: np.random.Generator | None = None
    timeout: float = 60.0
    current: GradientDescription = field(default_factory=lambda: next(iter(PRESETS.values())))
    notices: list[Notice] = field(default_factory=list)
    busy: bool = False

    def __post_init__(self) -> None:
        if self.http is None:
            self.http = requests.Session()
        if self.rng is None:
            self.rng = np.random.default_rng()

    # ---- derived views ----

    @property
    def css(self) -> str:
        return compile_gradient(self.current)

    def notify(self, message: str, level: Level) -> None:
        self.notices.append(Notice(message, level))

    # ---- whole-gradient actions ----

    def apply_preset(self, name: str) -> GradientDescription:
        self.current = preset(name)
        return self.current

    def randomize(self) -> GradientDescription:
        self.current = random_gradient(self.rng)
        return self.current

    def generate_ai(self, prompt: str) -> GradientDescription:
        if not prompt.strip() or self.busy:
            return self.current

        self.busy = True
        try:
            resp = self.http.post(self.api_url, json={"prompt": prompt}, timeout=self.timeout)
            if not 200 <= resp.status_code < 300:
                raise UpstreamError(f"gradient endpoint answered HTTP {resp.status_code}")
            self.current = GradientDescription.from_dict(resp.json())
        except (requests.RequestException, UpstreamError, ValueError, RecursionError) as exc:
            log.warning("Error generating AI gradient: %s", exc)
            self.randomize()
            self.notify(AI_FAILED, "error")
        else:
            self.notify(AI_OK, "success")
        finally:
            self.busy = False
        return self.current

    # ---- field edits ----

    def set_kind(self, kind: str) -> GradientDescription:
        self.current = self.current.with_kind(kind)
        return self.current

    def set_direction(self, direction: Number) -> GradientDescription:
        self.current = self.current.with_direction(direction)
        return self.current

    def update_stop_color(self, index: int, color: str) -> GradientDescription:
        self.current = self.current.with_stop(index, color=color)
        return self.current

    def update_stop_position(self, index: int, position: Number) -> GradientDescription:
        # not clamped; out-of-range values are left to the CSS engine
        self.current = self.current.with_stop(index, position=position)
        return self.current

    # ---- export ----

    def copy_css(self) -> str:
        text = css_declaration(self.current)
        self.notify(CSS_COPIED, "success")
        return text

    def export(self, fmt: str = "png", resolution: str = "4K") -> ExportResult | None:
        try:
            result = export_image(self.current, fmt=fmt, resolution=resolution)
        except RenderExportError:
            self.notify(EXPORT_FAILED, "error")
            return None
        self.notify(EXPORT_OK, "success")
        return result


__all__ = ["GradientSession", "Notice"]
