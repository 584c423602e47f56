"""Extract coordinates and label/value fields from free-form model text."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from citation_lens.domain.models import ExtractedField

# Four non-negative integers, brackets optional, optionally followed by a quoted span.
COORDINATE_PATTERN = re.compile(
    r'\[?\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*"([^"]*)"\s*)?\]?'
)

_BULLET_PREFIX = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s+")


def extract_boxes_with_text(text: Optional[str]) -> List[Tuple[List[int], Optional[str]]]:
    """Return ``(coords, quoted_text)`` pairs in order of appearance.

    ``quoted_text`` is None when the tuple has no quoted span; otherwise it is
    returned exactly as written between the quotes.
    """
    if not text:
        return []
    results = []
    for match in COORDINATE_PATTERN.finditer(text):
        coords = [int(match.group(i)) for i in range(1, 5)]
        results.append((coords, match.group(5)))
    return results


def extract_coordinates(text: Optional[str]) -> List[List[int]]:
    return [coords for coords, _ in extract_boxes_with_text(text)]


def _clean_label(label: str) -> str:
    label = _BULLET_PREFIX.sub("", label)
    return label.replace("**", "").replace("__", "").strip()


def parse_field_line(line: str) -> Optional[ExtractedField]:
    if ":" not in line:
        return None
    label, *rest = line.split(":")
    label = _clean_label(label)
    value = ":".join(rest).strip().removeprefix("**").strip()
    if not label or not value:
        return None
    return ExtractedField(label=label, value=value)


def parse_fields(text: Optional[str]) -> List[ExtractedField]:
    """Parse ``label: value`` lines; colons inside the value are preserved."""
    if not text:
        return []
    fields = []
    for line in text.splitlines():
        parsed = parse_field_line(line)
        if parsed is not None:
            fields.append(parsed)
    return fields


__all__ = [
    "COORDINATE_PATTERN",
    "extract_boxes_with_text",
    "extract_coordinates",
    "parse_field_line",
    "parse_fields",
]
