import streamlit as st

from loancomp.calculators import nz, total_selected_monthly_debts
from loancomp.debts import parse_debts_csv, parse_debts_paste
from ui.session import commit, get_workspace


def render_debt_cards() -> float:
    """Editable debt list; returns the monthly payments counted in DTI."""
    ws = get_workspace()
    if st.button("Add Debt", key="debt_add"):
        ws.add_debt()
    for debt in list(ws.debts):
        label = debt.creditor or "New debt"
        with st.expander(f"Debt #{debt.id}: {label}"):
            c1, c2, c3 = st.columns(3)
            creditor = c1.text_input("Creditor", value=debt.creditor, key=f"debt_creditor_{debt.id}")
            balance = c2.number_input(
                "Balance", value=nz(debt.balance), key=f"debt_balance_{debt.id}"
            )
            payment = c3.number_input(
                "Monthly Payment", value=nz(debt.monthlyPayment), key=f"debt_payment_{debt.id}"
            )
            c4, c5, c6 = st.columns(3)
            include = c4.checkbox(
                "Include in DTI", value=debt.includeInDTI, key=f"debt_dti_{debt.id}"
            )
            refinanced = c5.checkbox(
                "Will be refinanced", value=debt.willBeRefinanced, key=f"debt_refi_{debt.id}"
            )
            ws.update_debt(
                debt.id,
                creditor=creditor,
                balance=balance,
                monthlyPayment=payment,
                includeInDTI=include,
                willBeRefinanced=refinanced,
            )
            if c6.button("Remove", key=f"debt_remove_{debt.id}"):
                ws.remove_debt(debt.id)
                commit(ws)
                st.rerun()

    with st.expander("Import debts"):
        fmt = st.radio("Format", ["Tab separated", "CSV with header"], horizontal=True, key="debt_import_format")
        text = st.text_area("Paste rows (creditor, balance, monthly payment)", key="debt_import_text")
        if st.button("Import", key="debt_import"):
            parse = parse_debts_paste if fmt == "Tab separated" else parse_debts_csv
            imported = parse(text, ws.debts)
            ws.extend_debts(imported)
            st.caption(f"Imported {len(imported)} debts")

    total = total_selected_monthly_debts(ws.debts)
    st.markdown(f"**Total Monthly Debts:** ${total:,.2f}")
    commit(ws)
    return total
