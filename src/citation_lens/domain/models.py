"""Domain models for the assistant."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class BoundingBox:
    """Rectangle as fractions of image width/height.

    Ordering (x0 <= x1, y0 <= y1) is not enforced here; use ``is_well_formed``.
    """

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def is_well_formed(self) -> bool:
        ordered = self.x0 <= self.x1 and self.y0 <= self.y1
        in_range = all(0.0 <= v <= 1.0 for v in (self.x0, self.y0, self.x1, self.y1))
        return ordered and in_range

    def to_pixels(self, width: int, height: int) -> tuple[int, int, int, int]:
        return (
            round(self.x0 * width),
            round(self.y0 * height),
            round(self.x1 * width),
            round(self.y1 * height),
        )

    def to_percent(self) -> dict:
        return {
            "left": self.x0 * 100,
            "top": self.y0 * 100,
            "width": (self.x1 - self.x0) * 100,
            "height": (self.y1 - self.y0) * 100,
        }

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ExtractedField:
    label: str
    value: str


@dataclass
class Highlight:
    text: str
    bbox: BoundingBox


@dataclass
class FieldLocation:
    field: ExtractedField
    bbox: Optional[BoundingBox] = None


@dataclass
class Citation:
    url: str
    relevant_content: str
    explanation: str
    screenshot_url: str
    highlights: List[Highlight] = field(default_factory=list)


@dataclass
class ChatMessage:
    role: str
    content: str
    citations: List[str] = field(default_factory=list)
    citation_contents: Dict[int, Citation] = field(default_factory=dict)

    def to_api(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ActionResult:
    """Uniform success/failure envelope returned across component boundaries."""

    is_success: bool
    message: str
    data: Any = None
    error: Optional[str] = None
    raw_text: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Any = None, raw_text: Optional[str] = None) -> "ActionResult":
        return cls(is_success=True, message=message, data=data, raw_text=raw_text)

    @classmethod
    def fail(cls, message: str, error: Optional[str] = None, raw_text: Optional[str] = None) -> "ActionResult":
        return cls(is_success=False, message=message, error=error, raw_text=raw_text)

    def to_dict(self) -> dict:
        return asdict(self)


LOADING_STATUSES = ("idle", "thinking", "taking-screenshot", "processing-citations")


@dataclass
class LoadingState:
    status: str = "idle"
    message: str = ""


__all__ = [
    "BoundingBox",
    "ExtractedField",
    "Highlight",
    "FieldLocation",
    "Citation",
    "ChatMessage",
    "ActionResult",
    "LoadingState",
    "LOADING_STATUSES",
]
