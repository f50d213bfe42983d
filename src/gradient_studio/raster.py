"""Rasterise gradient descriptions for image export.

Geometry follows CSS: the linear gradient line runs through the centre at
``direction`` degrees (0 = up, clockwise) and is ``|w·sinθ| + |h·cosθ|`` long;
``radial-gradient(circle, ...)`` reaches the farthest corner; the conic sweep
starts at ``from <direction>deg`` and runs clockwise. Colours are interpolated
per channel in gamma-encoded sRGB, which is what browsers do for hex stops.

All heavy maths stays in NumPy. Images are produced in horizontal bands so an
8K export never materialises more than a few float arrays of one band.
"""

from __future__ import annotations

import io
import logging
import time
from dataclasses import dataclass
from typing import Mapping

import numpy as np
from PIL import Image

from .css import hex_stops
from .colors import hex_to_rgb01
from .errors import RenderExportError
from .model import GradientDescription

log = logging.getLogger(__name__)

RESOLUTIONS: dict[str, tuple[int, int]] = {
    "4K": (3840, 2160),
    "8K": (7680, 4320),
}

FORMATS: Mapping[str, str] = {
    "png": "PNG",
    "jpeg": "JPEG",
}

JPEG_QUALITY = 90
BAND_ROWS = 256


@dataclass(frozen=True)
class ExportResult:
    filename: str
    data: bytes
    mimetype: str


def _stop_arrays(desc: GradientDescription) -> tuple[np.ndarray, np.ndarray]:
    stops = hex_stops(desc.stops)
    pos = np.array([float(s.position) / 100.0 for s in stops], dtype=np.float64)
    # CSS: a stop positioned before an earlier one is moved up to it
    pos = np.maximum.accumulate(pos)
    rgb = np.array([hex_to_rgb01(s.color) for s in stops], dtype=np.float64)
    return pos, rgb


def _param(desc: GradientDescription, xs: np.ndarray, ys: np.ndarray, width: int, height: int) -> np.ndarray:
    """Gradient parameter t for pixel centres (xs, ys); 0 = first stop, 1 = last."""
    dx = xs - width / 2.0
    dy = ys - height / 2.0

    if desc.kind == "radial":
        radius = float(np.hypot(width / 2.0, height / 2.0)) or 1.0
        return np.hypot(dx, dy) / radius

    theta = np.deg2rad(float(desc.direction))
    if desc.kind == "conic":
        angle = np.rad2deg(np.arctan2(dx, -dy))
        return np.mod(angle - np.rad2deg(theta), 360.0) / 360.0

    sin, cos = np.sin(theta), np.cos(theta)
    length = abs(width * sin) + abs(height * cos) or 1.0
    return (dx * sin - dy * cos) / length + 0.5


def render(desc: GradientDescription, width: int, height: int) -> np.ndarray:
    """Return a ``height×width×3`` uint8 image of ``desc``."""
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    if not desc.stops:
        raise ValueError("gradient has no stops")

    pos, rgb = _stop_arrays(desc)
    out = np.empty((height, width, 3), dtype=np.uint8)
    xs = np.arange(width, dtype=np.float64) + 0.5

    for top in range(0, height, BAND_ROWS):
        bottom = min(height, top + BAND_ROWS)
        ys = (np.arange(top, bottom, dtype=np.float64) + 0.5)[:, None]
        t = _param(desc, xs[None, :], ys, width, height)
        band = np.empty((bottom - top, width, 3), dtype=np.float64)
        for ch in range(3):
            band[..., ch] = np.interp(t, pos, rgb[:, ch])
        out[top:bottom] = np.round(np.clip(band, 0.0, 1.0) * 255.0).astype(np.uint8)
    return out


def encode(pixels: np.ndarray, fmt: str) -> bytes:
    pil_format = FORMATS[fmt]
    buf = io.BytesIO()
    img = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    if pil_format == "JPEG":
        img.save(buf, format=pil_format, quality=JPEG_QUALITY)
    else:
        img.save(buf, format=pil_format)
    return buf.getvalue()


def export_filename(fmt: str, now: float | None = None) -> str:
    ms = int((time.time() if now is None else now) * 1000)
    return f"gradient-{ms}.{fmt}"


def export_image(desc: GradientDescription, fmt: str = "png", resolution: str = "4K") -> ExportResult:
    """Render ``desc`` at a named resolution and encode it as PNG or JPEG.

    Unknown formats or resolutions raise ValueError. Failures while rendering
    or encoding raise RenderExportError.
    """
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ValueError(f"unsupported format '{fmt}'")
    if resolution not in RESOLUTIONS:
        raise ValueError(f"unsupported resolution '{resolution}'")
    width, height = RESOLUTIONS[resolution]

    try:
        data = encode(render(desc, width, height), fmt)
    except (MemoryError, OSError, OverflowError, ValueError) as exc:
        log.exception("Error exporting image")
        raise RenderExportError(str(exc) or exc.__class__.__name__) from exc

    log.info("exported %s %dx%d (%d bytes)", fmt, width, height, len(data))
    return ExportResult(filename=export_filename(fmt), data=data, mimetype=f"image/{fmt}")


__all__ = ["ExportResult", "FORMATS", "RESOLUTIONS", "encode", "export_filename", "export_image", "render"]
