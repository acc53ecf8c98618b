"""
Zypher Web — Status Banner
==========================

One status line shared by both tabs, kept in ``st.session_state``.
"""

from __future__ import annotations

import logging

import streamlit as st

from zypher import ZypherError

logger = logging.getLogger(__name__)

_STATUS = "zypher_status"

IDLE = "idle"
SUCCESS = "success"
ERROR = "error"


def set_status(message: str, kind: str = IDLE) -> None:
    st.session_state[_STATUS] = (message, kind)


def report_error(action: str, exc: Exception) -> None:
    """Record a failed operation, naming the error kind when known."""
    if isinstance(exc, ZypherError):
        logger.warning("%s failed (%s): %s", action, exc.kind, exc)
        set_status(f"{action} failed [{exc.kind}]: {exc}", ERROR)
    else:
        logger.exception("%s failed", action)
        set_status(f"{action} failed: {exc}", ERROR)


def render() -> None:
    """Draw the current status."""
    message, kind = st.session_state.get(
        _STATUS, ("Ready to encrypt or decrypt files", IDLE)
    )
    if kind == SUCCESS:
        st.success(message)
    elif kind == ERROR:
        st.error(message)
    else:
        st.info(message)
