import streamlit as st

from citation_lens.config import load_config
from citation_lens.ui.vision_lab import render_vision_lab

st.set_page_config(page_title="Vision Lab", layout="wide")
config = load_config()

st.title("Vision Lab")
st.write("Upload an image and check where the vision model places its bounding boxes.")
render_vision_lab(config)
