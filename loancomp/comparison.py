"""Side-by-side evaluation of the selected loan programs."""
from __future__ import annotations

import logging
from typing import Optional

from loancomp.calculators import (
    down_payment_percent,
    loan_amount,
    loan_to_value,
    requires_mi,
    total_refinanced_debts,
    total_refinanced_monthly_payments,
    total_selected_monthly_debts,
)
from loancomp.evaluator import evaluate_program
from loancomp.models import ComparisonResult, ComparisonSummary, LoanData

logger = logging.getLogger(__name__)


def evaluate(loan: LoanData, preferred_program_id: Optional[int] = None) -> ComparisonResult:
    """Evaluate every selected program of ``loan`` in list order.

    Programs are filtered, never sorted: the order of ``loan.programs`` is the
    column order of every view and export.  The preferred row is the selected
    program whose id matches ``preferred_program_id``; anything else leaves
    ``preferred`` empty.
    """

    rows = [
        evaluate_program(loan, program) for program in loan.programs if program.selected
    ]
    preferred = None
    if preferred_program_id is not None:
        preferred = next(
            (r for r in rows if r.program.id == preferred_program_id), None
        )

    average_rate = sum(r.effective_rate for r in rows) / len(rows) if rows else 0.0
    summary = ComparisonSummary(
        loan_type=loan.loanType,
        loan_amount=loan_amount(loan),
        down_payment_percent=down_payment_percent(loan),
        loan_to_value=loan_to_value(loan),
        requires_mi=requires_mi(loan),
        total_selected_monthly_debts=total_selected_monthly_debts(loan.debts),
        total_refinanced_debts=total_refinanced_debts(loan.debts),
        total_refinanced_monthly_payments=total_refinanced_monthly_payments(loan.debts),
        total_programs=len(loan.programs),
        selected_programs=len(rows),
        average_rate=average_rate,
    )
    logger.debug(
        "Evaluated %d of %d programs (preferred=%s)",
        len(rows),
        len(loan.programs),
        preferred.program.id if preferred else None,
    )
    return ComparisonResult(rows=rows, summary=summary, preferred=preferred)
