"""Map 0-1000 model coordinates onto fractional boxes."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from citation_lens.domain.models import BoundingBox

COORDINATE_SCALE = 1000


def normalize_box(coords: Sequence[int]) -> BoundingBox:
    """Convert ``[ymin, xmin, ymax, xmax]`` on the 0-1000 scale to a BoundingBox.

    The axis order is what the prompts ask the model for; it is not checked.
    Values are neither clamped nor reordered.
    """
    if len(coords) != 4:
        raise ValueError(f"Expected 4 coordinates, got {len(coords)}")
    ymin, xmin, ymax, xmax = coords
    return BoundingBox(
        x0=xmin / COORDINATE_SCALE,
        y0=ymin / COORDINATE_SCALE,
        x1=xmax / COORDINATE_SCALE,
        y1=ymax / COORDINATE_SCALE,
    )


def normalize_boxes(raw: Iterable[Sequence[int]]) -> List[BoundingBox]:
    return [normalize_box(coords) for coords in raw]


__all__ = ["COORDINATE_SCALE", "normalize_box", "normalize_boxes"]
