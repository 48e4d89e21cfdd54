"""Streamlit helpers shared by the chat pages."""

import json

import streamlit as st
import streamlit.components.v1 as components
import structlog

logger = structlog.get_logger(__name__)

_COPY_KEY = "_copy_request"


def get_session(key: str, factory):
    """Return the page's session object, creating it on first load."""
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def _request_copy(text: str) -> None:
    st.session_state[_COPY_KEY] = text


def copy_button(text: str, key: str, label: str = "📋") -> None:
    """Button that copies text to the browser clipboard on the next render."""
    st.button(label, key=key, help="Copy", on_click=_request_copy, args=(text,))


def flush_clipboard() -> None:
    """Write a pending copy request to the clipboard.

    Best-effort: the browser may refuse (no permission, insecure origin); the
    failure only goes to the browser console.
    """
    text = st.session_state.pop(_COPY_KEY, None)
    if text is None:
        return
    logger.debug("clipboard.copy", chars=len(text))
    components.html(
        "<script>"
        f"const text = {json.dumps(text)};"
        "const clip = (window.parent && window.parent.navigator.clipboard) || navigator.clipboard;"
        "clip.writeText(text).catch(err => console.error('Copy failed:', err));"
        "</script>",
        height=0,
    )


def render_error(message: str | None) -> None:
    if message:
        st.error(f"**Error:** {message}")


def input_counter(text: str) -> None:
    st.caption(f"{len(text)} characters")
