import logging

import streamlit as st

from core.rules import evaluate_rules
from core.state import load_state, save_state
from core.storage import ScenarioStore
from ui.cards_debts import render_debt_cards
from ui.dashboard import render_comparison, render_exports
from ui.programs import render_program_cards
from ui.property import render_loan_parameters
from ui.session import get_workspace
from ui.sidebar import render_scenario_sidebar


def main():
    st.set_page_config(page_title="Loan Comparison", layout="wide")
    logging.basicConfig(level=logging.INFO)
    load_state()

    st.title("LOAN PROGRAM COMPARISON")
    st.caption("Side-by-side payments • DTI per program • Buy-down break-even • Exports")

    render_scenario_sidebar(ScenarioStore())

    left, right = st.columns([1, 2])
    with left:
        render_loan_parameters()
        st.subheader("Debts")
        render_debt_cards()
    with right:
        render_program_cards()

    ws = get_workspace()
    result = ws.evaluate()
    rule_results = evaluate_rules(ws.loan_data, result)
    render_comparison(result, rule_results)
    st.divider()
    render_exports(result, rule_results)
    save_state()


if __name__ == "__main__":
    main()
