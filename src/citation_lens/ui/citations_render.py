"""Render a cited page screenshot with its highlights."""

from __future__ import annotations

import streamlit as st

from citation_lens.domain.models import Citation
from citation_lens.utils.imaging import decode_image, draw_highlights


def render_citation(citation: Citation, *, label: str = "View highlighted source") -> None:
    if not citation or not citation.screenshot_url:
        return
    expander = st.expander(label)
    expander.markdown(f"[View webpage]({citation.url})")
    image = decode_image(citation.screenshot_url)
    boxes = [h.bbox for h in citation.highlights]
    expander.image(draw_highlights(image, boxes), caption=citation.explanation)
    for highlight in citation.highlights:
        expander.caption(highlight.text)
