"""Tabular views of a comparison for display and export."""
from __future__ import annotations

from typing import List

import pandas as pd

from core.utils import format_break_even, format_currency, format_percent
from loancomp.models import ComparisonResult, ProgramRow
from loancomp.presets import PROGRAM_TYPE_NAMES

NA = "N/A"


def _rate_cell(row: ProgramRow) -> str:
    p = row.program
    if p.buyDown:
        cut = max(p.rate - row.effective_rate, 0.0)
        return f"{format_percent(p.rate)} -> {format_percent(row.effective_rate)} (-{format_percent(cut)})"
    return format_percent(p.rate)


def _arm_cell(row: ProgramRow) -> str:
    if row.arm is None:
        return NA
    return (
        f"Fixed for {row.arm.fixed_years} years; Caps: {row.arm.caps}; "
        f"Max rate: {format_percent(row.arm.max_rate)}"
    )


def _savings_cell(row: ProgramRow) -> str:
    if row.savings_vs_current is None:
        return NA
    return format_currency(row.savings_vs_current)


def comparison_frame(result: ComparisonResult) -> pd.DataFrame:
    """One row per metric and one column per selected program, in list order."""
    rows = result.rows
    data = {
        "Program Type": [PROGRAM_TYPE_NAMES.get(r.program.type, r.program.type) for r in rows],
        "Term": [f"{r.program.term} years" for r in rows],
        "Interest Rate": [_rate_cell(r) for r in rows],
        "Loan Amount": [format_currency(r.loan_amount) for r in rows],
        "Upfront Buy-Down Cost": [
            format_currency(r.program.buyDownCost) if r.program.buyDown else NA for r in rows
        ],
        "Monthly P&I": [format_currency(r.monthly_pi) for r in rows],
        "Monthly HOI": [format_currency(r.payment.insurance) for r in rows],
        "Monthly Taxes": [format_currency(r.payment.taxes) for r in rows],
        "Monthly MI": [format_currency(r.monthly_mi) if r.monthly_mi > 0 else NA for r in rows],
        "Total Monthly Payment (PITI)": [format_currency(r.monthly_piti) for r in rows],
        "Housing DTI": [format_percent(r.dti.housingDTI, 1) for r in rows],
        "Total DTI": [format_percent(r.dti.totalDTI, 1) for r in rows],
    }
    if result.summary.loan_type == "refinance" and any(
        r.savings_vs_current is not None for r in rows
    ):
        data["Savings vs Current"] = [_savings_cell(r) for r in rows]
    if any(r.arm is not None for r in rows):
        data["ARM Details"] = [_arm_cell(r) for r in rows]

    columns = [r.program.name or f"Program {r.program.id}" for r in rows]
    frame = pd.DataFrame.from_dict(data, orient="index", columns=columns)
    frame.index.name = "Metric"
    return frame


def buy_down_frame(result: ComparisonResult) -> pd.DataFrame:
    """Break-even table for the selected programs with an active buy-down."""
    records: List[dict] = []
    for r in result.rows:
        if not r.program.buyDown or r.buy_down is None:
            continue
        months = r.buy_down.break_even_whole_months
        records.append(
            {
                "Program": r.program.name,
                "Upfront Cost": format_currency(r.program.buyDownCost),
                "Monthly savings": format_currency(r.buy_down.monthly_savings),
                "Break-even": (
                    f"{months} months ({format_break_even(months)})" if months else NA
                ),
            }
        )
    return pd.DataFrame(records, columns=["Program", "Upfront Cost", "Monthly savings", "Break-even"])
