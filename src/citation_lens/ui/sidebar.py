"""Sidebar layout."""

from __future__ import annotations

import streamlit as st

from citation_lens.config import validate_settings
from citation_lens.ui import session_state


def render_sidebar(cfg) -> dict:
    """Render settings and key status; returns chat overrides."""
    st.sidebar.title("Citation Lens")
    check = validate_settings(cfg)
    if check.ok:
        st.sidebar.caption("API keys: ✅ present")
    else:
        st.sidebar.error(check.message)

    models = list(cfg.vision.available_models) or [cfg.vision.model]
    default_index = models.index(cfg.vision.model) if cfg.vision.model in models else 0
    vision_model = st.sidebar.selectbox("Vision model", models, index=default_index)
    max_citations = st.sidebar.slider(
        "Citations to highlight", min_value=0, max_value=3, value=min(3, cfg.chat.max_citations_to_annotate)
    )
    if st.sidebar.button("Clear chat"):
        session_state.clear_messages()
    return {"vision_model_override": vision_model, "max_citations_override": max_citations}
