"""Gemini Lite page: prompt in, text out, relayed through /api/gemini."""

import streamlit as st

from frontend.chat_state import GeminiSession
from frontend.components import get_session, render_error

SESSION_KEY = "gemini_session"
INPUT_KEY = "gemini_input"

st.set_page_config(page_title="Chat with Gemini Lite", layout="centered")


def _session() -> GeminiSession:
    return get_session(SESSION_KEY, GeminiSession)


def on_send():
    session = _session()
    with st.spinner("Generating response..."):
        session.submit(st.session_state.get(INPUT_KEY, ""))
    st.session_state[INPUT_KEY] = session.state.pending_input


def on_clear():
    _session().clear()
    st.session_state[INPUT_KEY] = ""


def main():
    session = _session()
    state = session.state

    st.title("Chat with Gemini Lite")

    text = st.text_area(
        "Prompt",
        key=INPUT_KEY,
        placeholder="Type your question for Gemini...",
        height=120,
        disabled=state.is_loading,
        label_visibility="collapsed",
    )

    send_col, clear_col = st.columns([4, 1])
    send_col.button(
        "Send",
        on_click=on_send,
        disabled=state.is_loading or not (text or "").strip(),
        use_container_width=True,
        type="primary",
    )
    clear_col.button("Clear", on_click=on_clear, disabled=state.is_loading, use_container_width=True)

    render_error(state.last_error)

    if session.response:
        st.subheader("Gemini's answer:")
        st.markdown(session.response)


if __name__ == "__main__":
    main()
