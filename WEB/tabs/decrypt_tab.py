"""
Zypher Web — Decrypt Tab
========================

Open a sealed file from its three parts: the encrypted file, the
encrypted key JSON and the private key PEM.
"""

from __future__ import annotations

import streamlit as st

import zypher
from zypher.envelope import original_file_name

import status
from utils import human_file_size, upload_too_large

_RESULT = "zypher_decrypt_result"


def render() -> None:
    """Render the Decrypt tab."""

    encrypted = st.file_uploader("Select encrypted file", key="decrypt_file", on_change=_clear_result)
    key_file = st.file_uploader("Select encrypted key file", type=["json"],
                                key="decrypt_key", on_change=_clear_result)
    private_file = st.file_uploader("Select private key file", type=["pem"],
                                    key="decrypt_private_key", on_change=_clear_result)

    ready = encrypted is not None and key_file is not None and private_file is not None
    if st.button("🔓 Decrypt File", type="primary", use_container_width=True,
                 disabled=not ready, key="decrypt_action"):
        _decrypt(encrypted, key_file, private_file)

    result = st.session_state.get(_RESULT)
    if result:
        with st.container(border=True):
            st.markdown("**Decryption Complete**")
            st.download_button(
                f"📥 Download {result['name']}  ({human_file_size(len(result['data']))})",
                data=result["data"],
                file_name=result["name"],
                mime="application/octet-stream",
                use_container_width=True,
                key="dl_decrypted",
            )


def _clear_result() -> None:
    st.session_state.pop(_RESULT, None)


def _decrypt(encrypted, key_file, private_file) -> None:
    if encrypted is None or key_file is None or private_file is None:
        status.set_status("Please select all required files", status.ERROR)
        return
    for upload in (encrypted, key_file, private_file):
        if upload_too_large(upload.size):
            status.set_status(
                f"{upload.name} is {human_file_size(upload.size)}; "
                "files are decrypted in memory and this exceeds the configured limit.",
                status.ERROR,
            )
            return
    try:
        with st.spinner("Decrypting file…"):
            private_key = zypher.import_private_key(private_file.getvalue())
            plaintext = zypher.open_file(encrypted.getvalue(), key_file.getvalue(), private_key)
    except Exception as exc:
        _clear_result()
        status.report_error("Decryption", exc)
        return

    st.session_state[_RESULT] = {
        "name": original_file_name(encrypted.name),
        "data": plaintext,
    }
    status.set_status("File decrypted successfully!", status.SUCCESS)
