"""Ask the vision model where content sits in an image.

Every action returns an ``ActionResult``; gateway and configuration errors are
converted here and do not propagate to callers. An empty parse is reported as
an unsuccessful result carrying the model's raw text.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from citation_lens.config import load_config
from citation_lens.domain.errors import CitationLensError
from citation_lens.domain.models import ActionResult, BoundingBox, ExtractedField, FieldLocation, Highlight
from citation_lens.llm.gemini_client import GeminiClient
from citation_lens.logging import get_logger
from citation_lens.utils.imaging import split_data_url
from citation_lens.vision import prompts
from citation_lens.vision.normalize import normalize_box
from citation_lens.vision.parser import extract_boxes_with_text, extract_coordinates, parse_fields

logger = get_logger(__name__)


def _client(cfg, client: Optional[GeminiClient], model: Optional[str] = None) -> GeminiClient:
    return client or GeminiClient.from_config(cfg, model=model)


def _call(cfg, client, image: str, prompt: str, model: Optional[str] = None) -> str:
    mime_type, payload = split_data_url(image)
    return _client(cfg, client, model).generate(prompt, payload, mime_type=mime_type)


def _keep_box(box: BoundingBox, cfg) -> bool:
    if box.is_well_formed:
        return True
    logger.warning("Malformed bounding box from model", extra={"bbox": box.to_dict()})
    return not getattr(cfg.vision, "reject_malformed_boxes", False)


def _text_key(text: str) -> str:
    return re.sub(r"\s+", " ", text.replace('"', "'")).strip().casefold()


def process_image(image: str, prompt: str, model: Optional[str] = None, *, config=None, client=None) -> ActionResult:
    """Run an arbitrary prompt against an image and return text plus raw coordinates."""
    cfg = config or load_config()
    try:
        text = _call(cfg, client, image, prompt, model)
    except CitationLensError as exc:
        logger.error("Vision call failed", extra={"error": str(exc)})
        return ActionResult.fail(str(exc) or "Failed to process image", error=str(exc))
    return ActionResult.ok(
        "Successfully processed image",
        data={"text": text, "coordinates": extract_coordinates(text)},
        raw_text=text,
    )


def find_content_coordinates(image: str, content: str, *, config=None, client=None, model: Optional[str] = None) -> ActionResult:
    """Locate ``content`` in the image; ``data`` is ``{"text", "coordinates"}``."""
    cfg = config or load_config()
    prompt = prompts.build_search_prompt(content)
    try:
        text = _call(cfg, client, image, prompt, model)
    except CitationLensError as exc:
        logger.error("Vision call failed", extra={"error": str(exc)})
        return ActionResult.fail(str(exc), error=str(exc))

    raw = extract_coordinates(text)
    if not raw:
        logger.info("No coordinates in vision reply", extra={"raw_len": len(text)})
        return ActionResult.fail("No coordinates found in response", raw_text=text)
    boxes = [box for box in (normalize_box(c) for c in raw) if _keep_box(box, cfg)]
    if not boxes:
        return ActionResult.fail("All bounding boxes were rejected", raw_text=text)
    return ActionResult.ok(
        "Successfully found content coordinates",
        data={"text": content, "coordinates": boxes},
        raw_text=text,
    )


def find_phrases(image: str, phrases: Sequence[str], *, config=None, client=None, model: Optional[str] = None) -> ActionResult:
    """Locate several phrases in one call; ``data`` is a list of Highlight."""
    cfg = config or load_config()
    wanted = [p for p in phrases if p and p.strip()]
    if not wanted:
        return ActionResult.fail("No phrases to search for")
    try:
        text = _call(cfg, client, image, prompts.build_multi_phrase_prompt(wanted), model)
    except CitationLensError as exc:
        logger.error("Vision call failed", extra={"error": str(exc)})
        return ActionResult.fail(str(exc), error=str(exc))

    parsed = extract_boxes_with_text(text)
    if not parsed:
        logger.info("No coordinates in vision reply", extra={"raw_len": len(text)})
        return ActionResult.fail("No coordinates found in response", raw_text=text)
    by_key = {_text_key(p): p for p in wanted}
    highlights: List[Highlight] = []
    for coords, quoted in parsed:
        box = normalize_box(coords)
        if not _keep_box(box, cfg):
            continue
        label = quoted if quoted is not None else ""
        if quoted is None and len(wanted) == 1:
            label = wanted[0]
        highlights.append(Highlight(text=by_key.get(_text_key(label), label), bbox=box))
    if not highlights:
        return ActionResult.fail("All bounding boxes were rejected", raw_text=text)
    return ActionResult.ok(f"Found {len(highlights)} highlight(s)", data=highlights, raw_text=text)


def extract_fields(image: str, task: str, *, config=None, client=None, model: Optional[str] = None) -> ActionResult:
    """First step of field matching: ask for ``label: value`` pairs."""
    cfg = config or load_config()
    try:
        text = _call(cfg, client, image, prompts.build_field_extraction_prompt(task), model)
    except CitationLensError as exc:
        logger.error("Vision call failed", extra={"error": str(exc)})
        return ActionResult.fail(str(exc), error=str(exc))
    fields = parse_fields(text)
    if not fields:
        logger.info("No fields in vision reply", extra={"raw_len": len(text)})
        return ActionResult.fail("No fields found in response", raw_text=text)
    return ActionResult.ok(f"Extracted {len(fields)} field(s)", data=fields, raw_text=text)


def _match_field(fields: List[ExtractedField], quoted: str, taken: set) -> Optional[int]:
    key = _text_key(quoted)
    if not key:
        return None
    for idx, f in enumerate(fields):
        if idx not in taken and _text_key(f.value) == key:
            return idx
    for idx, f in enumerate(fields):
        value_key = _text_key(f.value)
        if idx not in taken and value_key and (key in value_key or value_key in key):
            return idx
    return None


def match_fields_to_locations(
    image: str,
    fields: Sequence[ExtractedField],
    *,
    config=None,
    client=None,
    model: Optional[str] = None,
) -> ActionResult:
    """Second step of field matching: locate each value, pairing by returned text.

    The model may return fewer, more or reordered boxes than there are fields;
    fields without a matching box keep ``bbox=None``.
    """
    cfg = config or load_config()
    fields = list(fields)
    if not fields:
        return ActionResult.fail("No fields to locate")
    try:
        text = _call(cfg, client, image, prompts.build_field_matching_prompt(fields), model)
    except CitationLensError as exc:
        logger.error("Vision call failed", extra={"error": str(exc)})
        return ActionResult.fail(str(exc), error=str(exc))

    parsed = extract_boxes_with_text(text)
    if not parsed:
        logger.info("No coordinates in vision reply", extra={"raw_len": len(text)})
        return ActionResult.fail("No coordinates found in response", raw_text=text)

    locations = [FieldLocation(field=f) for f in fields]
    taken: set = set()
    for coords, quoted in parsed:
        if quoted is None:
            continue
        idx = _match_field(fields, quoted, taken)
        if idx is None:
            logger.info("Unmatched located text", extra={"text": quoted})
            continue
        box = normalize_box(coords)
        if not _keep_box(box, cfg):
            continue
        locations[idx].bbox = box
        taken.add(idx)
    located = sum(1 for loc in locations if loc.bbox is not None)
    if not located:
        return ActionResult.fail("No field values could be matched to locations", raw_text=text)
    return ActionResult.ok(f"Located {located} of {len(fields)} field(s)", data=locations, raw_text=text)


__all__ = [
    "process_image",
    "find_content_coordinates",
    "find_phrases",
    "extract_fields",
    "match_fields_to_locations",
]
