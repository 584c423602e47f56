import streamlit as st

from citation_lens.config import load_config
from citation_lens.logging import configure_logging
from citation_lens.ui import render_chat, render_sidebar

st.set_page_config(page_title="Citation Lens", layout="wide")
config = load_config()
configure_logging(config.logging.level)

overrides = render_sidebar(config)

st.title("Citation Lens")
st.caption("Answers with the cited passage highlighted on a screenshot of its source.")
render_chat(overrides=overrides)
