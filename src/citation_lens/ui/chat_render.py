"""Chat rendering helpers."""

from __future__ import annotations

import streamlit as st

from citation_lens.domain.models import ChatMessage
from citation_lens.research.citations import cited_indexes, strip_citation_markers
from citation_lens.services import chat_service
from citation_lens.ui import session_state
from citation_lens.ui.citations_render import render_citation

EXAMPLE_QUESTIONS = [
    "What's the height of the Burj Khalifa?",
    "When was Richard Nixon impeached?",
    "How many parameters does GPT-4 have?",
]


def render_message(message: ChatMessage) -> None:
    if message.role == "user":
        st.markdown(f"**You:** {message.content}")
        return

    body = strip_citation_markers(message.content)
    links = [f"[[{n}]]({message.citations[n - 1]})" for n in cited_indexes(message.content, message.citations)]
    if links:
        body = f"{body} {' '.join(links)}"
    st.markdown(body)
    for number in sorted(message.citation_contents):
        render_citation(message.citation_contents[number], label=f"View highlighted source [{number}]")


def _render_examples() -> None:
    cols = st.columns(len(EXAMPLE_QUESTIONS))
    for col, question in zip(cols, EXAMPLE_QUESTIONS):
        if col.button(question):
            session_state.set_pending_input(question)
            st.rerun()


def render_chat(overrides: dict | None = None) -> None:
    session_state.ensure_state()
    messages = session_state.get_messages()

    if not messages:
        st.subheader("What do you want to know?")
        _render_examples()

    for message in messages:
        render_message(message)

    question = session_state.pop_pending_input() or st.chat_input("Ask anything...")
    if not question or not question.strip():
        return

    question = question.strip()
    history = list(messages)
    session_state.add_message(ChatMessage(role="user", content=question))
    render_message(messages[-1])

    with st.status("Thinking...") as status:

        def on_status(state) -> None:
            if state.status == "idle":
                status.update(label="Done", state="complete")
            else:
                status.update(label=state.message)

        reply = chat_service.ask(history, question, overrides=overrides, on_status=on_status)
    session_state.add_message(reply)
    render_message(reply)
