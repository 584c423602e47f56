"""Data URL helpers and highlight painting for screenshots."""

from __future__ import annotations

import base64
import io
import re
from typing import Iterable, Tuple

from PIL import Image, ImageColor, ImageDraw

from citation_lens.domain.models import BoundingBox

HIGHLIGHT_COLORS = [
    "#FFD700",  # Gold
    "#90EE90",  # Light Green
    "#87CEEB",  # Sky Blue
    "#FFA07A",  # Light Salmon
    "#DDA0DD",  # Plum
    "#F0E68C",  # Khaki
]
FILL_ALPHA = 0x33
OUTLINE_ALPHA = 0x66

_DATA_URL = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.DOTALL)

# ScreenshotOne answers "jpg"; the vision API wants a registered MIME type.
_MIME_ALIASES = {"image/jpg": "image/jpeg"}


def split_data_url(data_url: str, default_mime: str = "image/jpeg") -> Tuple[str, str]:
    """Return ``(mime_type, base64_payload)``; bare base64 gets ``default_mime``."""
    match = _DATA_URL.match(data_url.strip())
    if not match:
        return default_mime, data_url.strip()
    mime = match.group("mime").lower()
    return _MIME_ALIASES.get(mime, mime), match.group("data")


def to_data_url(raw: bytes, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def decode_image(data_url: str) -> Image.Image:
    _, payload = split_data_url(data_url)
    return Image.open(io.BytesIO(base64.b64decode(payload)))


def _rgba(color: str, alpha: int) -> tuple:
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b, alpha)


def draw_highlights(image: Image.Image, boxes: Iterable[BoundingBox], line_width: int = 2) -> Image.Image:
    """Paint translucent rectangles for each box, cycling through the palette."""
    base = image.convert("RGBA")
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    width, height = base.size
    for index, box in enumerate(boxes):
        color = HIGHLIGHT_COLORS[index % len(HIGHLIGHT_COLORS)]
        left, top, right, bottom = box.to_pixels(width, height)
        # inverted boxes would make Pillow raise
        rect = [min(left, right), min(top, bottom), max(left, right), max(top, bottom)]
        draw.rectangle(rect, fill=_rgba(color, FILL_ALPHA), outline=_rgba(color, OUTLINE_ALPHA), width=line_width)
    return Image.alpha_composite(base, overlay).convert("RGB")


__all__ = [
    "HIGHLIGHT_COLORS",
    "split_data_url",
    "to_data_url",
    "decode_image",
    "draw_highlights",
]
