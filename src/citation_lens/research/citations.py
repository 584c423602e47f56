"""Citation marker helpers for answer text."""

from __future__ import annotations

import re
from typing import List

CITATION_MARKER = re.compile(r"\[(\d+)\]")
_MARKER_WITH_SPACE = re.compile(r"\s*\[\d+\]")
# sentence end followed by a run of markers, e.g. "tall.[1][2] Next"
_MARKED_SENTENCE_END = re.compile(r"([.!?])((?:\[\d+\])+)\s+")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+|\n+")


def cited_indexes(content: str, citations: List[str]) -> List[int]:
    """1-based marker numbers in order of appearance that point at a known citation."""
    seen: List[int] = []
    for match in CITATION_MARKER.finditer(content or ""):
        index = int(match.group(1))
        if 1 <= index <= len(citations) and index not in seen:
            seen.append(index)
    return seen


def strip_citation_markers(content: str) -> str:
    """Remove markers together with the whitespace in front of them."""
    return _MARKER_WITH_SPACE.sub("", content or "")


def split_sentences(content: str) -> List[str]:
    """Split answer text into sentences, keeping trailing markers on their sentence."""
    # keep "text. [1]" attached to the sentence it follows
    attached = re.sub(r"\s+(?=\[\d+\])", "", content or "")
    attached = _MARKED_SENTENCE_END.sub(r"\1\2\n", attached)
    return [s for s in _SENTENCE_SPLIT.split(attached) if s.strip()]


def cited_passage(content: str, index: int) -> str:
    """Sentences carrying marker ``[index]``, markers removed.

    Falls back to the whole answer when no sentence carries the marker.
    """
    marker = f"[{index}]"
    sentences = [s for s in split_sentences(content) if marker in s]
    passage = " ".join(sentences) if sentences else (content or "")
    return re.sub(r"\s+", " ", strip_citation_markers(passage)).strip()


__all__ = [
    "CITATION_MARKER",
    "cited_indexes",
    "strip_citation_markers",
    "split_sentences",
    "cited_passage",
]
