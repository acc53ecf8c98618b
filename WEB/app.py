"""
Zypher — Web Edition
====================

Streamlit application entry point.

Launch:
    cd zypher
    streamlit run WEB/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# -- Ensure project root is importable ------------------------------------
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

# -- Ensure WEB/ directory is importable ----------------------------------
_web_root = str(Path(__file__).resolve().parent)
if _web_root not in sys.path:
    sys.path.insert(0, _web_root)

import streamlit as st  # noqa: E402

from zypher.config import configure_logging, settings  # noqa: E402

configure_logging()

# ---------------------------------------------------------------------------
# Page config — must be the first Streamlit command
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title=settings.app_name,
    page_icon="🔐",
    layout="centered",
)

st.markdown(
    """
    <style>
    .stButton > button[kind="primary"] {
        background-color: #6d28d9;
        border-color: #6d28d9;
    }
    .zypher-header {
        text-align: center;
        padding: 1rem 0 0.5rem 0;
    }
    .zypher-header p {
        color: #a0a0b8;
        font-size: 0.95rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

st.markdown(
    f"""
    <div class="zypher-header">
        <h1>🔐 {settings.app_name}</h1>
        <p>Encrypt and decrypt your files with AES and RSA encryption</p>
    </div>
    """,
    unsafe_allow_html=True,
)

with st.sidebar:
    st.markdown("### About")
    st.markdown(
        "Each file is encrypted with a fresh AES-256-GCM key. That key is "
        "wrapped with RSA-2048 OAEP so only the private key holder can "
        "recover it."
    )
    st.markdown("---")
    st.markdown(
        "• Keep the encrypted file, `encrypted_key.json` and the private key.  \n"
        "• All three are needed to decrypt.  \n"
        f"• Files up to {settings.max_upload_mb} MB are processed in memory."
    )

# ---------------------------------------------------------------------------
# Tabs
# ---------------------------------------------------------------------------

import status  # noqa: E402
from tabs.decrypt_tab import render as render_decrypt  # noqa: E402
from tabs.encrypt_tab import render as render_encrypt  # noqa: E402

tab_encrypt, tab_decrypt = st.tabs(["🔒 Encrypt", "🔓 Decrypt"])

with tab_encrypt:
    render_encrypt()

with tab_decrypt:
    render_decrypt()

status.render()
