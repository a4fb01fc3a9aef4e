import json
import streamlit as st
from core import state


def test_save_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    st.session_state["loan_data"] = {"loanType": "purchase"}
    st.session_state["preferred_program_id"] = None
    st.session_state["prog_rate_1"] = 6.5
    state.save_state()
    data = json.loads(file.read_text())
    assert "prog_rate_1" not in data
    assert data["loan_data"] == {"loanType": "purchase"}
    assert data["preferred_program_id"] is None


def test_load_state_ignores_widget_keys(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text(json.dumps({"scenario_name": "Smith", "debt_add": True}))
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert st.session_state["scenario_name"] == "Smith"
    assert "debt_add" not in st.session_state


def test_load_state_tolerates_corrupt_file(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    file.write_text("{")
    monkeypatch.setattr(state, "SESSION_FILE", str(file))
    st.session_state.clear()
    state.load_state()
    assert "loan_data" not in st.session_state
