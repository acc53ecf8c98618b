"""
Zypher Web — Encrypt Tab
========================

Seal one uploaded file.  By default a fresh RSA-2048 key pair is
generated for every file; alternatively the file can be sealed to an
existing public key.

Offers four downloads: the encrypted file, ``encrypted_key.json`` and
(when generated here) both PEM keys.
"""

from __future__ import annotations

import streamlit as st

import zypher
from zypher.envelope import (
    KEY_ARTIFACT_NAME,
    PRIVATE_KEY_NAME,
    PUBLIC_KEY_NAME,
    encrypted_file_name,
)

import status
from utils import human_file_size, upload_too_large

_RESULT = "zypher_encrypt_result"

_NEW_PAIR = "Generate a new key pair"
_EXISTING = "Use an existing public key"


# ---------------------------------------------------------------------------
# Public render function
# ---------------------------------------------------------------------------

def render() -> None:
    """Render the Encrypt tab."""

    uploaded = st.file_uploader(
        "Select a file to encrypt",
        key="encrypt_file",
        on_change=_clear_result,
    )
    if uploaded:
        st.caption(f"**{uploaded.name}**  —  {human_file_size(uploaded.size)}")

    key_mode = st.radio("Recipient key", [_NEW_PAIR, _EXISTING], horizontal=True, key="encrypt_key_mode")

    public_upload = None
    if key_mode == _EXISTING:
        public_upload = st.file_uploader(
            "Select a public key", type=["pem"], key="encrypt_public_key",
        )

    if st.button("🔒 Encrypt File", type="primary", use_container_width=True,
                 disabled=uploaded is None, key="encrypt_action"):
        _encrypt(uploaded, public_upload, key_mode)

    result = st.session_state.get(_RESULT)
    if result:
        _render_downloads(result)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _clear_result() -> None:
    st.session_state.pop(_RESULT, None)


def _encrypt(uploaded, public_upload, key_mode: str) -> None:
    if uploaded is None:
        status.set_status("Please select a file to encrypt", status.ERROR)
        return
    if upload_too_large(uploaded.size):
        status.set_status(
            f"{uploaded.name} is {human_file_size(uploaded.size)}; "
            "files are encrypted in memory and this exceeds the configured limit.",
            status.ERROR,
        )
        return

    try:
        with st.spinner("Generating keys and encrypting file…"):
            if key_mode == _EXISTING:
                if public_upload is None:
                    status.set_status("Please select a public key", status.ERROR)
                    return
                public_key = zypher.import_public_key(public_upload.getvalue())
                public_pem = private_pem = None
            else:
                pair = zypher.generate_key_pair()
                public_key = pair.public_key
                public_pem = zypher.export_key(pair.public_key)
                private_pem = zypher.export_key(pair.private_key)

            sealed = zypher.seal_file(uploaded.getvalue(), public_key)
    except Exception as exc:
        _clear_result()
        status.report_error("Encryption", exc)
        return

    st.session_state[_RESULT] = {
        "name": encrypted_file_name(uploaded.name),
        "encrypted_file": sealed.encrypted_file,
        "encrypted_key": sealed.encrypted_key,
        "public_pem": public_pem,
        "private_pem": private_pem,
    }
    status.set_status(
        "File encrypted successfully! Download the encrypted file and keys.",
        status.SUCCESS,
    )


def _render_downloads(result: dict) -> None:
    with st.container(border=True):
        st.markdown("**Download Encrypted Files**")
        cols = st.columns(2)
        with cols[0]:
            st.download_button(
                "📥 Encrypted File",
                data=result["encrypted_file"],
                file_name=result["name"],
                mime="application/octet-stream",
                use_container_width=True,
                key="dl_encrypted_file",
            )
        with cols[1]:
            st.download_button(
                "📥 Encrypted Key",
                data=result["encrypted_key"],
                file_name=KEY_ARTIFACT_NAME,
                mime="application/json",
                use_container_width=True,
                key="dl_encrypted_key",
            )
        if result["private_pem"]:
            cols = st.columns(2)
            with cols[0]:
                st.download_button(
                    "📥 Public Key",
                    data=result["public_pem"],
                    file_name=PUBLIC_KEY_NAME,
                    mime="application/x-pem-file",
                    use_container_width=True,
                    key="dl_public_key",
                )
            with cols[1]:
                st.download_button(
                    "📥 Private Key",
                    data=result["private_pem"],
                    file_name=PRIVATE_KEY_NAME,
                    mime="application/x-pem-file",
                    use_container_width=True,
                    key="dl_private_key",
                )
            st.warning(
                "**Important:** Store your private key securely. "
                "You will need it to decrypt the file."
            )
