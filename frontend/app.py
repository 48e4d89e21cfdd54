"""Chat Relays - Streamlit landing page.

Thin client for the relay API. Each provider gets its own page under
pages/; this file only shows backend health and links to them.

Run with: streamlit run frontend/app.py
"""

import streamlit as st

from frontend.chat_state import API_URL, check_health

st.set_page_config(page_title="Chat Relays", layout="centered")

st.markdown("""
<style>
    .status-badge {
        display: inline-block;
        padding: 2px 8px;
        border-radius: 12px;
        font-size: 0.75rem;
        font-weight: 600;
    }
    .status-ok { background: #d4edda; color: #155724; }
    .status-err { background: #f8d7da; color: #721c24; }
</style>
""", unsafe_allow_html=True)

PROVIDER_PAGES = [
    ("openai", "pages/1_ChatGPT.py", "ChatGPT"),
    ("deepseek", "pages/2_DeepSeek.py", "DeepSeek"),
    ("gemini", "pages/3_Gemini_Lite.py", "Gemini Lite"),
]


def _badge(ok: bool, label: str) -> str:
    css = "status-ok" if ok else "status-err"
    return f'<span class="status-badge {css}">* {label}</span>'


def main():
    """Run the landing page."""
    health = check_health()
    status = health.get("status", "unknown")
    components = health.get("components", {})

    st.title("Chat Relays")
    st.caption("Talk to ChatGPT, DeepSeek or Gemini through one small backend")

    if status == "offline":
        st.warning("[WARN] The relay API is offline. Start it with `uvicorn backend.main:app`.")

    for name, page, label in PROVIDER_PAGES:
        ok = components.get(name) == "ok"
        col_link, col_status = st.columns([3, 1])
        with col_link:
            st.page_link(page, label=label)
        col_status.markdown(_badge(ok, "Configured" if ok else "No API key"), unsafe_allow_html=True)

    with st.sidebar:
        st.markdown("### Backend")
        st.code(API_URL, language=None)
        st.markdown(_badge(status == "healthy", f"API {status}"), unsafe_allow_html=True)
        if st.button("Check Connection", use_container_width=True):
            st.rerun()


if __name__ == "__main__":
    main()
