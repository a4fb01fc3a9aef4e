"""Bridge between ``st.session_state`` and a ``LoanWorkspace``.

Session state holds plain JSON (so it can be autosaved); every render builds
a workspace from it and writes the edited data back with ``commit``.
"""
import logging

import streamlit as st

from loancomp import codec
from loancomp.workspace import LoanWorkspace

logger = logging.getLogger(__name__)

WIDGET_PREFIXES = ("prog_", "debt_")


def get_workspace() -> LoanWorkspace:
    raw = st.session_state.get("loan_data")
    preferred = st.session_state.get("preferred_program_id")
    last_id = int(st.session_state.get("last_program_id") or 0)
    if not raw:
        return LoanWorkspace(preferred_program_id=preferred, last_program_id=last_id)
    result = codec.decode({"loanData": raw, "preferredProgramId": preferred})
    if not result.ok:
        logger.warning("Discarding unreadable session loan data: %s", result.error.message)
        return LoanWorkspace(last_program_id=last_id)
    return LoanWorkspace(
        result.value.loan_data, result.value.preferred_program_id, last_id
    )


def commit(ws: LoanWorkspace) -> None:
    st.session_state["loan_data"] = ws.loan_data.model_dump(mode="json")
    st.session_state["preferred_program_id"] = ws.preferred_program_id
    st.session_state["last_program_id"] = ws.last_program_id


def reset_widgets() -> None:
    """Forget per-program and per-debt widget values, e.g. after loading a scenario."""
    for key in list(st.session_state.keys()):
        if str(key).startswith(WIDGET_PREFIXES):
            del st.session_state[key]
