"""Interactive page for trying locator prompts on an uploaded image."""

from __future__ import annotations

import json

import streamlit as st

from citation_lens.utils.imaging import decode_image, draw_highlights, to_data_url
from citation_lens.vision import locator


def _result_json(result) -> str:
    return json.dumps(result.to_dict(), indent=2, default=str)


def render_vision_lab(cfg) -> None:
    models = list(cfg.vision.available_models) or [cfg.vision.model]
    model = st.selectbox("Model", models, index=models.index(cfg.vision.model) if cfg.vision.model in models else 0)
    upload = st.file_uploader("Image", type=["png", "jpg", "jpeg", "webp"])
    mode = st.radio("Task", ["Search content", "Search phrases", "Extract fields"], horizontal=True)
    query = st.text_area("Content, phrases (one per line) or extraction task")

    if not st.button("Run"):
        return
    if upload is None:
        st.warning("Please select an image")
        return
    if not query.strip():
        st.warning("Please enter content to search for")
        return

    image = to_data_url(upload.getvalue(), upload.type or "image/jpeg")
    if mode == "Search content":
        result = locator.find_content_coordinates(image, query.strip(), config=cfg, model=model)
        boxes = result.data["coordinates"] if result.is_success else []
    elif mode == "Search phrases":
        result = locator.find_phrases(image, query.splitlines(), config=cfg, model=model)
        boxes = [h.bbox for h in result.data] if result.is_success else []
    else:
        fields_result = locator.extract_fields(image, query, config=cfg, model=model)
        if not fields_result.is_success:
            st.error(fields_result.message)
            st.code(_result_json(fields_result), language="json")
            return
        st.table([{"label": f.label, "value": f.value} for f in fields_result.data])
        result = locator.match_fields_to_locations(image, fields_result.data, config=cfg, model=model)
        boxes = [loc.bbox for loc in result.data if loc.bbox is not None] if result.is_success else []

    if result.is_success:
        st.success(f"Found {len(boxes)} matches for: \"{query.strip()}\"")
        st.image(draw_highlights(decode_image(image), boxes))
    else:
        st.error(f"Error: {result.message}")
    with st.expander("API response"):
        st.code(_result_json(result), language="json")
