# color_space.py – 8-bit sRGB ↔ HSV ↔ CIELAB (D65) and the ΔE used by the game
#   - IEC 61966-2-1 companding (threshold 0.04045, exponent 2.4)
#   - sRGB↔XYZ matrices from colour-science
#   - CIE 1976 L*a*b* with the 0.008856 / 903.3 breakpoints
#   - ΔE is plain Euclidean distance in Lab

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from coloraide import Color as CAColor
from colour.models import RGB_COLOURSPACE_sRGB

Rgb = Tuple[int, int, int]
Hsv = Tuple[float, float, float]
Lab = np.ndarray  # float64, shape (3,): L, a, b

# --- constants ---------------------------------------------------------------
_GAMMA = 2.4
_WHITE = np.array([0.95047, 1.0, 1.08883])  # D65, Y normalised to 1
_EPSILON = 0.008856
_KAPPA = 903.3

L_RANGE = (0.0, 100.0)
AB_RANGE = (-128.0, 127.0)
_LAB_LO = np.array([L_RANGE[0], AB_RANGE[0], AB_RANGE[0]])
_LAB_HI = np.array([L_RANGE[1], AB_RANGE[1], AB_RANGE[1]])

_RGB_XYZ = np.asarray(RGB_COLOURSPACE_sRGB.matrix_RGB_to_XYZ, dtype=np.float64)
_XYZ_RGB = np.asarray(RGB_COLOURSPACE_sRGB.matrix_XYZ_to_RGB, dtype=np.float64)

FIT_HEX = {"method": "raytrace"}  # gamut-fit for CSS input outside sRGB


def _round_half_up(x: np.ndarray) -> np.ndarray:
    # Math.round semantics; np.round rounds half to even
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)


def _to_u8(rgb01: np.ndarray) -> Rgb:
    u8 = np.clip(_round_half_up(np.asarray(rgb01) * 255.0), 0, 255).astype(int)
    return int(u8[0]), int(u8[1]), int(u8[2])


# --- hex codec ---------------------------------------------------------------
def canon_hex(s: str) -> str:
    """Normalize to '#rrggbb'; accept 3- or 6-digit hex only."""
    raw = (s or "").strip().lstrip("#")
    if len(raw) == 3 and all(c in string.hexdigits for c in raw):
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6 or not all(c in string.hexdigits for c in raw):
        raise ValueError(f"hex must be 3 or 6 hex digits, got {s!r}")
    return "#" + raw.lower()


def hex_to_rgb(s: str) -> Rgb:
    raw = canon_hex(s)[1:]
    return int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)


def rgb_to_hex(rgb: Rgb) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


# --- IEC 61966-2-1 companding --------------------------------------------------
def _uncompand(v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, np.float64)
    return np.where(v > 0.04045, ((v + 0.055) / 1.055) ** _GAMMA, v / 12.92)


def _compand(v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, np.float64)
    # negative linear values only occur out of gamut; keep the power real
    pos = np.power(np.maximum(v, 0.0), 1 / _GAMMA)
    return np.where(v > 0.0031308, 1.055 * pos - 0.055, 12.92 * v)


# --- CIELAB nonlinearity ------------------------------------------------------
def _f(t: np.ndarray) -> np.ndarray:
    return np.where(t > _EPSILON, np.cbrt(t), 7.787 * t + 16 / 116)


def _f_inv(t: np.ndarray) -> np.ndarray:
    t3 = t * t * t
    return np.where(t3 > _EPSILON, t3, (t - 16 / 116) / 7.787)


def rgb_to_lab(rgb: Rgb) -> Lab:
    """8-bit sRGB triple → CIELAB ``[L, a, b]``."""
    lrgb = _uncompand(np.asarray(rgb, dtype=np.float64) / 255.0)
    xyz = (_RGB_XYZ @ lrgb) / _WHITE
    fx, fy, fz = _f(xyz)
    y = xyz[1]
    L = 116.0 * fy - 16.0 if y > _EPSILON else _KAPPA * y
    return np.array([L, 500.0 * (fx - fy), 200.0 * (fy - fz)])


def lab_to_rgb(lab: Lab) -> Rgb:
    """CIELAB → 8-bit sRGB, rounded then clamped to [0, 255]."""
    L, a, b = (float(c) for c in lab)
    fy = (L + 16.0) / 116.0
    f = np.array([a / 500.0 + fy, fy, fy - b / 200.0])
    xyz = _f_inv(f) * _WHITE
    return _to_u8(_compand(_XYZ_RGB @ xyz))


def clamp_lab(lab: Lab) -> Lab:
    return np.clip(np.asarray(lab, dtype=np.float64), _LAB_LO, _LAB_HI)


def perceptual_distance(lab1: Lab, lab2: Lab) -> float:
    """Euclidean ΔE over (ΔL, Δa, Δb) – the 1976 formula, not CIEDE2000."""
    d = np.asarray(lab2, dtype=np.float64) - np.asarray(lab1, dtype=np.float64)
    return float(np.sqrt(d @ d))


# --- HSV -------------------------------------------------------------------------
def hsv_to_rgb(h: float, s: float, v: float) -> Rgb:
    """h in degrees, s and v in [0, 1]; six 60° sectors."""
    h = float(h) % 360.0
    s = min(max(float(s), 0.0), 1.0)
    v = min(max(float(v), 0.0), 1.0)
    c = v * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = v - c
    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x
    return _to_u8(np.array([r, g, b]) + m)


def rgb_to_hsv(rgb: Rgb) -> Hsv:
    r, g, b = (c / 255.0 for c in rgb)
    hi, lo = max(r, g, b), min(r, g, b)
    c = hi - lo
    if c == 0:
        h = 0.0
    elif hi == r:
        h = 60.0 * (((g - b) / c) % 6)
    elif hi == g:
        h = 60.0 * ((b - r) / c + 2)
    else:
        h = 60.0 * ((r - g) / c + 4)
    s = 0.0 if hi == 0 else c / hi
    return h, s, hi


# --- value type ------------------------------------------------------------------
@dataclass(frozen=True)
class Color:
    """An 8-bit sRGB color; HSV and Lab are derived views."""

    rgb: Rgb

    def __post_init__(self) -> None:
        if len(self.rgb) != 3:
            raise ValueError("rgb must have three channels")
        rgb = tuple(int(c) for c in self.rgb)
        if any(c < 0 or c > 255 for c in rgb):
            raise ValueError(f"rgb channels must be in [0, 255], got {rgb}")
        object.__setattr__(self, "rgb", rgb)

    @classmethod
    def from_hex(cls, s: str) -> "Color":
        return cls(hex_to_rgb(s))

    @classmethod
    def from_lab(cls, lab: Lab) -> "Color":
        return cls(lab_to_rgb(clamp_lab(lab)))

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float) -> "Color":
        return cls(hsv_to_rgb(h, s, v))

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.rgb)

    @property
    def lab(self) -> Lab:
        return rgb_to_lab(self.rgb)

    @property
    def hsv(self) -> Hsv:
        return rgb_to_hsv(self.rgb)

    def distance_to(self, other: "Color") -> float:
        return perceptual_distance(self.lab, other.lab)

    def __str__(self) -> str:
        return self.hex


def parse_color(text: str) -> Color:
    """Any CSS color string (hex, named, rgb(), lab(), …) → gamut-fitted Color."""
    try:
        return Color.from_hex(text)
    except ValueError:
        pass
    try:
        ca = CAColor((text or "").strip())
    except ValueError as exc:
        raise ValueError(f"invalid color: {text!r}") from exc
    return Color.from_hex(
        ca.convert("srgb").to_string(hex=True, alpha=False, fit=FIT_HEX)
    )


__all__ = [
    "Color",
    "Lab",
    "Rgb",
    "canon_hex",
    "clamp_lab",
    "hex_to_rgb",
    "hsv_to_rgb",
    "lab_to_rgb",
    "parse_color",
    "perceptual_distance",
    "rgb_to_hex",
    "rgb_to_hsv",
    "rgb_to_lab",
]
