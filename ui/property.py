import streamlit as st

from core.utils import format_currency, format_percent
from loancomp.calculators import down_payment_percent, loan_amount, loan_to_value, nz
from ui.session import commit, get_workspace


def _amount(value) -> float:
    return max(nz(value), 0.0)


def render_loan_parameters():
    """Loan type, price or refinance amount, escrows and income."""
    ws = get_workspace()
    loan = ws.loan_data
    with st.expander("Loan Parameters", expanded=True):
        loan.loanType = st.radio(
            "Loan Type",
            ["purchase", "refinance"],
            index=["purchase", "refinance"].index(loan.loanType),
            format_func=str.title,
            horizontal=True,
        )
        if loan.loanType == "purchase":
            loan.purchasePrice = st.number_input(
                "Purchase Price", min_value=0.0, value=_amount(loan.purchasePrice), step=1000.0
            )
            pct = st.number_input(
                "Down Payment %",
                min_value=0.0,
                max_value=100.0,
                value=min(_amount(loan.downPaymentPercent), 100.0),
                step=0.5,
            )
            amount = st.number_input(
                "Down Payment", min_value=0.0, value=_amount(loan.downPayment), step=1000.0
            )
            if pct != loan.downPaymentPercent:
                loan.downPaymentPercent = pct
                loan.downPayment = round(loan.purchasePrice * pct / 100, 2)
            else:
                loan.downPayment = amount
                if loan.purchasePrice > 0:
                    loan.downPaymentPercent = round(amount / loan.purchasePrice * 100, 3)
            st.caption(
                f"Loan Amount: {format_currency(loan_amount(loan))} "
                f"({format_percent(down_payment_percent(loan), 1)} down)"
            )
        else:
            loan.refinanceLoanAmount = st.number_input(
                "Refinance Loan Amount",
                min_value=0.0,
                value=_amount(loan.refinanceLoanAmount),
                step=1000.0,
            )
            loan.currentPropertyValue = st.number_input(
                "Current Property Value",
                min_value=0.0,
                value=_amount(loan.currentPropertyValue),
                step=1000.0,
            )
            st.caption(f"LTV: {format_percent(loan_to_value(loan), 1)}")
        c1, c2 = st.columns(2)
        loan.annualPropertyTax = c1.number_input(
            "Annual Property Tax", min_value=0.0, value=_amount(loan.annualPropertyTax)
        )
        loan.annualHomeInsurance = c2.number_input(
            "Annual Home Insurance", min_value=0.0, value=_amount(loan.annualHomeInsurance)
        )
        loan.grossMonthlyIncome = st.number_input(
            "Gross Monthly Income", min_value=0.0, value=_amount(loan.grossMonthlyIncome)
        )
    commit(ws)
