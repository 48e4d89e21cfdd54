"""DeepSeek page: one question, one answer, relayed through /api/deepseek."""

import streamlit as st

from frontend.chat_state import DeepSeekSession
from frontend.components import copy_button, flush_clipboard, get_session, input_counter, render_error

SESSION_KEY = "deepseek_session"
INPUT_KEY = "deepseek_input"

st.set_page_config(page_title="Chat with DeepSeek", layout="centered")


def _session() -> DeepSeekSession:
    return get_session(SESSION_KEY, DeepSeekSession)


def on_send():
    session = _session()
    with st.spinner("Sending..."):
        session.submit(st.session_state.get(INPUT_KEY, ""))
    st.session_state[INPUT_KEY] = session.state.pending_input


def on_clear():
    _session().clear()
    st.session_state[INPUT_KEY] = ""


def main():
    session = _session()
    state = session.state

    st.title("Chat with DeepSeek")

    text = st.text_area(
        "Message",
        key=INPUT_KEY,
        placeholder="Type your question or message here...",
        height=160,
        disabled=state.is_loading,
        label_visibility="collapsed",
    )
    input_counter(text or "")
    render_error(state.last_error)

    send_col, clear_col = st.columns([4, 1])
    send_col.button(
        "Send",
        on_click=on_send,
        disabled=state.is_loading or not (text or "").strip(),
        use_container_width=True,
        type="primary",
    )
    clear_col.button("Clear", on_click=on_clear, disabled=state.is_loading, use_container_width=True)

    if session.response:
        header, copy_col = st.columns([6, 1])
        header.markdown("**DeepSeek's answer:**")
        with copy_col:
            copy_button(session.response, key="deepseek_copy", label="📋 Copy")
        st.markdown(session.response)
        flush_clipboard()


if __name__ == "__main__":
    main()
