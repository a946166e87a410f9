"""Share card for a finished session.

A fixed 500×500 layout: radial background, shadowed disc in the chosen color,
title, hex label and a faint watermark in the bottom-right corner.
"""

from __future__ import annotations

import io
import logging
from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFilter, ImageFont

from .color_space import Color, hex_to_rgb

log = logging.getLogger(__name__)

SIZE = 500
DISC_CENTER = (250, 200)
DISC_RADIUS = 120
TITLE = "My Perfect Color"
WATERMARK = "Perfect Color"
FILENAME = "perfect_color.png"

_BG_INNER = hex_to_rgb("#fdfbfb")
_BG_OUTER = hex_to_rgb("#e9ecef")
_INK = hex_to_rgb("#333333")
_INK_LIGHT = hex_to_rgb("#555555")


def _font(size: int, bold: bool = False) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    name = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        try:
            return ImageFont.truetype(f"/usr/share/fonts/truetype/dejavu/{name}", size)
        except OSError:
            log.debug("%s not found, using Pillow's default font", name)
            return ImageFont.load_default()


def radial_background(size: int = SIZE, r0: float = 50.0, r1: float = 250.0) -> Image.Image:
    yy, xx = np.mgrid[0:size, 0:size].astype(np.float64)
    c = size / 2
    d = np.hypot(xx - c, yy - c)
    t = np.clip((d - r0) / (r1 - r0), 0.0, 1.0)[..., None]
    inner = np.array(_BG_INNER, dtype=np.float64)
    outer = np.array(_BG_OUTER, dtype=np.float64)
    rgb = np.round(inner + (outer - inner) * t).astype(np.uint8)
    return Image.fromarray(rgb)


def _centered_text(
    draw: ImageDraw.ImageDraw, baseline_y: int, text: str, font, fill: Tuple[int, ...]
) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = (SIZE - (right - left)) // 2 - left
    draw.text((x, baseline_y - bottom), text, font=font, fill=fill)


def compose_share_image(color: Color) -> Image.Image:
    img = radial_background().convert("RGBA")
    cx, cy = DISC_CENTER
    r = DISC_RADIUS
    box = [cx - r, cy - r, cx + r, cy + r]

    # soft drop shadow: offset 10px down, blurred
    shadow = Image.new("RGBA", img.size, (0, 0, 0, 0))
    ImageDraw.Draw(shadow).ellipse(
        [box[0], box[1] + 10, box[2], box[3] + 10], fill=(0, 0, 0, 77)
    )
    img = Image.alpha_composite(img, shadow.filter(ImageFilter.GaussianBlur(10)))

    draw = ImageDraw.Draw(img)
    draw.ellipse(box, fill=color.rgb, outline=_INK, width=5)
    _centered_text(draw, 360, TITLE, _font(32, bold=True), _INK)
    _centered_text(draw, 410, color.hex, _font(28), _INK_LIGHT)

    overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
    odraw = ImageDraw.Draw(overlay)
    wfont = _font(16)
    left, _, right, bottom = odraw.textbbox((0, 0), WATERMARK, font=wfont)
    odraw.text((490 - (right - left) - left, 490 - bottom), WATERMARK, font=wfont, fill=(0, 0, 0, 77))
    img = Image.alpha_composite(img, overlay)
    return img.convert("RGB")


def share_png(color: Color) -> bytes:
    buf = io.BytesIO()
    compose_share_image(color).save(buf, format="PNG")
    return buf.getvalue()


def share_text(color: Color) -> str:
    return f"I found my perfect color: {color.hex}"


__all__ = ["FILENAME", "compose_share_image", "radial_background", "share_png", "share_text"]
