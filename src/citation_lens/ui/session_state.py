"""Helpers for Streamlit session state."""

from __future__ import annotations

import streamlit as st

from citation_lens.domain.models import ChatMessage

MESSAGES_KEY = "chat_messages"
PENDING_INPUT_KEY = "pending_input"


def ensure_state() -> None:
    if MESSAGES_KEY not in st.session_state:
        st.session_state[MESSAGES_KEY] = []


def add_message(message: ChatMessage) -> None:
    ensure_state()
    st.session_state[MESSAGES_KEY].append(message)


def get_messages() -> list[ChatMessage]:
    ensure_state()
    return st.session_state[MESSAGES_KEY]


def clear_messages() -> None:
    st.session_state[MESSAGES_KEY] = []


def pop_pending_input() -> str | None:
    return st.session_state.pop(PENDING_INPUT_KEY, None)


def set_pending_input(text: str) -> None:
    st.session_state[PENDING_INPUT_KEY] = text
