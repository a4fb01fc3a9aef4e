import json

import streamlit as st

from core.storage import DEFAULT_SCOPE, ScenarioStore, client_scope
from loancomp.workspace import LoanWorkspace
from ui.session import commit, get_workspace, reset_widgets


def _scope() -> str:
    client_id = st.sidebar.text_input("Client ID (optional)", key="scenario_client").strip()
    return client_scope(client_id) if client_id else DEFAULT_SCOPE


def render_scenario_sidebar(store: ScenarioStore) -> None:
    """Save, load, delete, move, import and export named scenarios."""
    st.sidebar.header("Scenarios")
    scope = _scope()
    ws = get_workspace()

    name = st.sidebar.text_input(
        "Scenario Name", value=st.session_state.get("scenario_name") or ""
    )
    if st.sidebar.button("Save Scenario"):
        try:
            store.save(name, ws.loan_data, ws.preferred_program_id, scope)
        except ValueError as exc:
            st.sidebar.error(str(exc))
        else:
            st.session_state["scenario_name"] = name.strip()
            st.sidebar.success(f"Saved {name.strip()!r}")

    saved = [r.name for r in store.list(scope)]
    if not saved:
        st.sidebar.caption("No saved scenarios.")
    else:
        choice = st.sidebar.selectbox("Saved Scenarios", saved)
        c1, c2 = st.sidebar.columns(2)
        if c1.button("Load"):
            result = store.load(choice, scope)
            if result is None or not result.ok:
                st.sidebar.error(result.error.message if result else "Scenario not found")
            else:
                loaded = LoanWorkspace.from_scenario(result.value)
                loaded.last_program_id = max(loaded.last_program_id, ws.last_program_id)
                reset_widgets()
                commit(loaded)
                st.session_state["scenario_name"] = choice
                st.rerun()
        if c2.button("Delete"):
            store.delete(choice, scope)
            st.rerun()
        if scope == DEFAULT_SCOPE:
            target = st.sidebar.text_input("Move to client ID", key="scenario_move_target").strip()
            if st.sidebar.button("Move to Client") and target:
                try:
                    store.move_scope(choice, DEFAULT_SCOPE, client_scope(target))
                except ValueError as exc:
                    st.sidebar.error(str(exc))
                else:
                    st.rerun()

    st.sidebar.download_button(
        "Export Scenarios",
        data=json.dumps(store.export_scenarios(scope), indent=2).encode("utf-8"),
        file_name="scenarios.json",
        mime="application/json",
    )
    upload = st.sidebar.file_uploader("Import Scenarios", type=["json"])
    overwrite = st.sidebar.checkbox("Overwrite existing")
    if upload is not None and st.sidebar.button("Import"):
        try:
            data = json.loads(upload.getvalue().decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            st.sidebar.error("Invalid JSON format")
        else:
            count, errors = store.import_scenarios(data, scope, overwrite)
            st.sidebar.success(f"Imported {count} scenarios")
            for err in errors:
                st.sidebar.warning(err)
