from __future__ import annotations

import numpy as np

from .color_space import Color

CANVAS_SIZE = 300


def _hsv_planes(h: float, s: np.ndarray, v: np.ndarray) -> np.ndarray:
    # vectorised sector decomposition; same arithmetic as color_space.hsv_to_rgb
    h = float(h) % 360.0
    c = v * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    zero = np.zeros_like(c)
    sector = int(h // 60) % 6  # h may round up to exactly 360.0
    r, g, b = [
        (c, x, zero),
        (x, c, zero),
        (zero, c, x),
        (zero, x, c),
        (x, zero, c),
        (c, zero, x),
    ][sector]
    m = v - c
    rgb = np.stack([r + m, g + m, b + m], axis=-1)
    return np.clip(np.floor(rgb * 255.0 + 0.5), 0, 255).astype(np.uint8)


def sv_plane(hue: float, size: int = CANVAS_SIZE) -> np.ndarray:
    """
    (size, size, 3) uint8 raster of the saturation/value plane at `hue`.
    Saturation grows left→right, value falls top→bottom.
    """
    if size < 1:
        raise ValueError("size must be ≥ 1")
    idx = np.arange(size, dtype=np.float64) / size
    s, v = np.meshgrid(idx, 1.0 - idx)
    return _hsv_planes(hue, s, v)


def pick_color(hue: float, x: float, y: float, size: int = CANVAS_SIZE) -> Color:
    """Pointer position inside the plane → the color drawn there."""
    if size < 1:
        raise ValueError("size must be ≥ 1")
    x = min(max(float(x), 0.0), float(size))
    y = min(max(float(y), 0.0), float(size))
    return Color.from_hsv(hue, x / size, 1.0 - y / size)


__all__ = ["CANVAS_SIZE", "pick_color", "sv_plane"]
