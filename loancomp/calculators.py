from __future__ import annotations

import math
from typing import Iterable

from loancomp.models import Debt, LoanData
from loancomp.presets import MI_ANNUAL_PCT, MI_MAX_LTV_PCT, MI_MIN_DOWN_PAYMENT_PCT


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Loan inputs are edited field by field, so any of them may be blank,
    ``None`` or ``NaN`` while the form is half filled.  Coercing them here
    keeps every downstream formula total.
    """

    try:
        if x is None:
            return default
        value = float(x)
    except (TypeError, ValueError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def monthly_payment(principal, annual_rate_pct, term_years):
    """Calculate the fully amortizing monthly payment for a loan.

    ``principal`` is the starting loan amount, ``annual_rate_pct`` is the
    nominal yearly interest rate (e.g. ``6.5`` for 6.5%), and ``term_years`` is
    the amortization period in years.  A zero rate amortizes straight-line and
    a non-positive principal or term yields ``0``.
    """

    L = nz(principal)
    r = nz(annual_rate_pct) / 100 / 12
    n = int(nz(term_years) * 12)
    if L <= 0 or n <= 0:
        return 0.0
    if r <= 0:
        return L / n
    growth = (1 + r) ** n
    return L * r * growth / (growth - 1)


def loan_amount(loan: LoanData) -> float:
    """Base loan amount for the active loan type."""

    if loan.loanType == "purchase":
        return nz(loan.purchasePrice) - nz(loan.downPayment)
    return nz(loan.refinanceLoanAmount)


def down_payment_percent(loan: LoanData) -> float:
    price = nz(loan.purchasePrice)
    if loan.loanType != "purchase" or price <= 0:
        return 0.0
    return nz(loan.downPayment) / price * 100


def compute_ltv(property_value, principal) -> float:
    """Compute loan‑to‑value percentage."""

    value = nz(property_value)
    if value <= 0:
        return 0.0
    return 100.0 * nz(principal) / value


def loan_to_value(loan: LoanData) -> float:
    if loan.loanType != "refinance":
        return 0.0
    return compute_ltv(loan.currentPropertyValue, loan.refinanceLoanAmount)


def requires_mi(loan: LoanData, principal=None) -> bool:
    """Whether mortgage insurance applies.

    Purchases test the loan-level down payment.  Refinances test LTV, using
    ``principal`` in place of the refinance amount when one is given.
    """

    if loan.loanType == "purchase":
        return down_payment_percent(loan) < MI_MIN_DOWN_PAYMENT_PCT
    if principal is None:
        ltv = loan_to_value(loan)
    else:
        ltv = compute_ltv(loan.currentPropertyValue, principal)
    return ltv > MI_MAX_LTV_PCT


def monthly_mi(loan: LoanData, principal) -> float:
    """Monthly MI on ``principal`` at the fixed annual factor, or ``0``."""

    amount = nz(principal)
    if amount <= 0 or not requires_mi(loan, amount):
        return 0.0
    return amount * (MI_ANNUAL_PCT / 100) / 12


def total_selected_monthly_debts(debts: Iterable[Debt]) -> float:
    return sum(nz(d.monthlyPayment) for d in debts if d.includeInDTI)


def total_refinanced_debts(debts: Iterable[Debt]) -> float:
    return sum(nz(d.balance) for d in debts if d.willBeRefinanced)


def total_refinanced_monthly_payments(debts: Iterable[Debt]) -> float:
    return sum(nz(d.monthlyPayment) for d in debts if d.willBeRefinanced)


def dti(front_housing, all_liabilities, total_income):
    """Return housing and total debt‑to‑income ratios as percentages."""

    inc = nz(total_income)
    if inc <= 0:
        return 0.0, 0.0
    return nz(front_housing) / inc * 100, nz(all_liabilities) / inc * 100
