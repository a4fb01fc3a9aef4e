import streamlit as st

from core.utils import format_currency
from loancomp.calculators import nz
from loancomp.evaluator import monthly_piti
from loancomp.presets import LOAN_TERMS, PROGRAM_TYPE_NAMES
from ui.session import commit, get_workspace

PROGRAM_TYPES = list(PROGRAM_TYPE_NAMES.keys())


def _changed(program, values: dict) -> dict:
    return {k: v for k, v in values.items() if getattr(program, k) != v}


def _optional(value: float):
    return value if value > 0 else None


def _render_debt_selection(ws, pid: int) -> None:
    selection = ws.loan_data.debt_selection(pid)
    if selection is None:
        current = [d.id for d in ws.debts if d.includeInDTI]
    else:
        current = [d.id for d in ws.debts if d.id in selection.selectedDebtIds]
    creditors = {d.id: d.creditor or f"Debt {d.id}" for d in ws.debts}
    chosen = st.multiselect(
        "Debts counted in DTI",
        list(creditors),
        default=current,
        format_func=creditors.get,
        key=f"prog_debts_{pid}",
    )
    if chosen != current:
        ws.set_program_debts(pid, chosen)


def _render_card(ws, program, position: int, count: int) -> bool:
    """Render one program card; returns True when the list changed shape."""
    pid = program.id
    refinance = ws.loan_data.loanType == "refinance"
    with st.expander(program.name or f"Program {pid}", expanded=True):
        c1, c2, c3 = st.columns(3)
        terms = list(LOAN_TERMS) if program.term in LOAN_TERMS else sorted(set(LOAN_TERMS) | {program.term})
        first = {
            "type": c1.selectbox(
                "Program Type",
                PROGRAM_TYPES,
                index=PROGRAM_TYPES.index(program.type),
                format_func=PROGRAM_TYPE_NAMES.get,
                key=f"prog_type_{pid}",
            ),
            "term": c2.selectbox(
                "Term (years)", terms, index=terms.index(program.term), key=f"prog_term_{pid}"
            ),
            "rate": c3.number_input(
                "Rate %", min_value=0.0, value=max(nz(program.rate), 0.0), step=0.125,
                format="%.3f", key=f"prog_rate_{pid}",
            ),
        }
        c4, c5 = st.columns(2)
        first["selected"] = c4.checkbox(
            "Include in comparison", value=program.selected, key=f"prog_selected_{pid}"
        )
        first["buyDown"] = c5.checkbox("Rate buy-down", value=program.buyDown, key=f"prog_buydown_{pid}")
        changes = _changed(program, first)
        if changes:
            program = ws.update_program(pid, **changes)
            if "type" in changes or "term" in changes:
                st.session_state.pop(f"prog_name_{pid}", None)
            if "rate" in changes or "buyDown" in changes:
                st.session_state.pop(f"prog_effective_{pid}", None)

        second = {"name": st.text_input("Name", value=program.name, key=f"prog_name_{pid}")}
        if program.buyDown:
            b1, b2 = st.columns(2)
            second["buyDownCost"] = b1.number_input(
                "Buy-Down Cost", min_value=0.0, value=max(nz(program.buyDownCost), 0.0),
                key=f"prog_cost_{pid}",
            )
            second["effectiveRate"] = b2.number_input(
                "Bought-Down Rate %", min_value=0.0, value=max(nz(program.effectiveRate), 0.0),
                step=0.125, format="%.3f", key=f"prog_effective_{pid}",
            )
        if refinance:
            r1, r2 = st.columns(2)
            second["previousMonthlyPITI"] = _optional(r1.number_input(
                "Current Monthly PITI", min_value=0.0, value=max(nz(program.previousMonthlyPITI), 0.0),
                key=f"prog_previous_{pid}",
            ))
            second["overrideLoanAmount"] = _optional(r2.number_input(
                "Loan Amount Override", min_value=0.0, value=max(nz(program.overrideLoanAmount), 0.0),
                key=f"prog_override_{pid}",
            ))
        changes = _changed(program, second)
        if changes:
            program = ws.update_program(pid, **changes)

        if ws.debts:
            _render_debt_selection(ws, pid)

        st.caption(f"Estimated PITI: {format_currency(monthly_piti(ws.loan_data, program))}")
        m1, m2, m3 = st.columns(3)
        if m1.button("Move Up", key=f"prog_up_{pid}", disabled=position == 0):
            ws.move_program_up(pid)
            return True
        if m2.button("Move Down", key=f"prog_down_{pid}", disabled=position == count - 1):
            ws.move_program_down(pid)
            return True
        if m3.button("Remove", key=f"prog_remove_{pid}"):
            ws.remove_program(pid)
            return True
    return False


def render_program_cards():
    ws = get_workspace()
    st.subheader("Loan Programs")
    if st.button("Add Program", key="prog_add"):
        ws.add_program()
    count = len(ws.programs)
    for position, program in enumerate(list(ws.programs)):
        if _render_card(ws, program, position, count):
            commit(ws)
            st.rerun()

    options = [None] + [p.id for p in ws.programs if p.selected]
    names = {p.id: p.name for p in ws.programs}
    current = ws.preferred_program_id if ws.preferred_program_id in options else None
    preferred = st.selectbox(
        "Preferred Program",
        options,
        index=options.index(current),
        format_func=lambda pid: "None" if pid is None else names[pid],
    )
    ws.set_preferred(preferred)
    commit(ws)
