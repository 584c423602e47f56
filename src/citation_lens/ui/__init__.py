"""Streamlit UI helpers for citation-lens."""

from citation_lens.ui.sidebar import render_sidebar
from citation_lens.ui.chat_render import render_chat, render_message
from citation_lens.ui.citations_render import render_citation
from citation_lens.ui import session_state

__all__ = ["render_sidebar", "render_chat", "render_message", "render_citation", "session_state"]
