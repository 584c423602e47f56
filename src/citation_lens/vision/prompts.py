"""Prompt templates for the vision model.

Each template is paired with the parser that reads its reply; bump
``PROMPT_VERSION`` whenever the requested output shape changes and update
``citation_lens.vision.parser`` alongside it.

Reply shapes:

- ``search_term`` / ``multi_phrase``: ``[ymin, xmin, ymax, xmax]`` or
  ``[ymin, xmin, ymax, xmax, "phrase"]``, read by ``extract_boxes_with_text``.
- ``field_extraction``: one ``label: value`` per line, read by ``parse_fields``.
- ``field_matching``: ``[ymin, xmin, ymax, xmax, "value"]`` per line.
"""

from __future__ import annotations

from typing import Iterable, List

from jinja2 import Template

PROMPT_VERSION = "2"

_SEARCH_TERM = Template(
    """Return bounding boxes as JSON arrays [ymin, xmin, ymax, xmax].

Return bounding boxes that capture details about "{{ content }}".
Return multiple bounding boxes if there are multiple instances of the content.
Ensure each bounding box is solely focussed on capturing the specific content.
This is important - we want to cite the exact content, not the surrounding text."""
)

_MULTI_PHRASE = Template(
    """Return bounding boxes as JSON arrays [ymin, xmin, ymax, xmax, "phrase"], one per line.
Coordinates are integers from 0 to 1000 relative to the image size.

Find each of these phrases in the image:
{% for phrase in phrases %}- "{{ phrase }}"
{% endfor %}
Copy the phrase exactly as listed into the fifth element.
Return one bounding box per occurrence and skip phrases that are not visible."""
)

_FIELD_EXTRACTION = Template(
    """{{ task }}

List every field you extract on its own line using the format:
label: value

Do not add bullets, numbering, markdown or any other text."""
)

_FIELD_MATCHING = Template(
    """Return bounding boxes as JSON arrays [ymin, xmin, ymax, xmax, "value"], one per line.
Coordinates are integers from 0 to 1000 relative to the image size.

Locate the text of each value below in the image:
{% for field in fields %}- {{ field.label }}: "{{ field.value | replace('"', "'") }}"
{% endfor %}
Copy the value text exactly as listed into the fifth element.
Return one bounding box per value and skip values that are not visible."""
)


def build_search_prompt(content: str) -> str:
    return _SEARCH_TERM.render(content=content)


def build_multi_phrase_prompt(phrases: Iterable[str]) -> str:
    cleaned: List[str] = [p.replace('"', "'") for p in phrases if p and p.strip()]
    return _MULTI_PHRASE.render(phrases=cleaned)


def build_field_extraction_prompt(task: str) -> str:
    return _FIELD_EXTRACTION.render(task=task.strip())


def build_field_matching_prompt(fields) -> str:
    return _FIELD_MATCHING.render(fields=fields)


__all__ = [
    "PROMPT_VERSION",
    "build_search_prompt",
    "build_multi_phrase_prompt",
    "build_field_extraction_prompt",
    "build_field_matching_prompt",
]
