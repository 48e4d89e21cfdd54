"""ChatGPT page: multi-turn conversation relayed through /api/chatgpt."""

import streamlit as st

from frontend.chat_state import ChatGPTSession
from frontend.components import copy_button, flush_clipboard, get_session, input_counter, render_error

SESSION_KEY = "chatgpt_session"
INPUT_KEY = "chatgpt_input"

st.set_page_config(page_title="Chat with ChatGPT", layout="centered")


def _session() -> ChatGPTSession:
    return get_session(SESSION_KEY, ChatGPTSession)


def on_send():
    session = _session()
    with st.spinner("ChatGPT is typing..."):
        session.submit(st.session_state.get(INPUT_KEY, ""))
    st.session_state[INPUT_KEY] = session.state.pending_input


def on_clear():
    _session().clear()
    st.session_state[INPUT_KEY] = ""


def render_messages(session: ChatGPTSession) -> None:
    if not session.state.messages:
        st.info("💬 Start a conversation with ChatGPT!")
        return

    for i, message in enumerate(session.state.messages):
        with st.chat_message(message.role):
            st.markdown(message.content)
            left, right = st.columns([6, 1])
            left.caption(message.timestamp.strftime("%H:%M"))
            with right:
                copy_button(message.content, key=f"chatgpt_copy_{i}")


def main():
    session = _session()
    state = session.state

    st.title("Chat with ChatGPT")
    render_messages(session)
    flush_clipboard()
    render_error(state.last_error)

    text = st.text_area(
        "Message",
        key=INPUT_KEY,
        placeholder="Type your message...",
        height=100,
        disabled=state.is_loading,
        label_visibility="collapsed",
    )
    input_counter(text or "")

    send_col, clear_col = st.columns([4, 1])
    send_col.button(
        "Sending..." if state.is_loading else "Send",
        on_click=on_send,
        disabled=state.is_loading or not (text or "").strip(),
        use_container_width=True,
        type="primary",
    )
    clear_col.button(
        "Clear",
        on_click=on_clear,
        disabled=state.is_loading or not state.messages,
        use_container_width=True,
    )


if __name__ == "__main__":
    main()
