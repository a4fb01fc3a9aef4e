"""Per-program payment, DTI and buy-down figures.

Everything here takes the full input and returns a fresh value.  Incomplete
input never raises: amounts degrade to ``0`` and a break-even that cannot
be formed comes back as ``None`` so the UI can show "N/A".
"""
from __future__ import annotations

from typing import Optional

from loancomp.calculators import loan_amount, monthly_mi, monthly_payment, nz
from loancomp.calculators import dti as dti_ratios
from loancomp.models import (
    ArmDetails,
    BuyDownAnalysis,
    DTIResult,
    LoanData,
    PaymentBreakdown,
    Program,
    ProgramDebtSelection,
    ProgramRow,
)
from loancomp.presets import ARM_CAPS, ARM_LIFETIME_CAP_PCT, ARM_TABLE, PROGRAM_TYPE_NAMES


def effective_rate(program: Program) -> float:
    return nz(program.effectiveRate if program.buyDown else program.rate)


def rate_reduction(program: Program) -> float:
    return max(nz(program.rate) - nz(program.effectiveRate), 0.0)


def program_loan_amount(loan: LoanData, program: Program) -> float:
    override = nz(program.overrideLoanAmount)
    if override > 0:
        return override
    return loan_amount(loan)


def program_monthly_mi(loan: LoanData, program: Program) -> float:
    """MI for one program.

    Refinance MI follows the program's own principal, since an override amount
    changes LTV.  Purchase MI is a loan-level figure shared by every program.
    """

    if loan.loanType == "purchase":
        return monthly_mi(loan, loan_amount(loan))
    return monthly_mi(loan, program_loan_amount(loan, program))


def payment_breakdown(loan: LoanData, program: Program) -> PaymentBreakdown:
    pi = monthly_payment(
        program_loan_amount(loan, program), effective_rate(program), program.term
    )
    taxes = nz(loan.annualPropertyTax) / 12
    insurance = nz(loan.annualHomeInsurance) / 12
    mi = program_monthly_mi(loan, program)
    return PaymentBreakdown(
        principal_interest=pi,
        taxes=taxes,
        insurance=insurance,
        mi=mi,
        total=pi + taxes + insurance + mi,
    )


def monthly_piti(loan: LoanData, program: Program) -> float:
    return payment_breakdown(loan, program).total


def program_debt_payments(
    loan: LoanData, program: Program, selection: Optional[ProgramDebtSelection] = None
) -> float:
    """Monthly debt payments counted against ``program``.

    An explicit selection picks debts by id; without one every debt flagged
    ``includeInDTI`` counts.
    """

    if selection is None:
        selection = loan.debt_selection(program.id)
    if selection is None:
        debts = [d for d in loan.debts if d.includeInDTI]
    else:
        chosen = set(selection.selectedDebtIds)
        debts = [d for d in loan.debts if d.id in chosen]
    return sum(nz(d.monthlyPayment) for d in debts)


def dti(
    loan: LoanData, program: Program, selection: Optional[ProgramDebtSelection] = None
) -> DTIResult:
    housing = monthly_piti(loan, program)
    debts = program_debt_payments(loan, program, selection)
    total = housing + debts
    housing_dti, total_dti = dti_ratios(housing, total, loan.grossMonthlyIncome)
    return DTIResult(
        housingDTI=housing_dti,
        totalDTI=total_dti,
        housingPayment=housing,
        debtPayments=debts,
        totalMonthlyObligations=total,
    )


def buy_down_analysis(loan: LoanData, program: Program) -> BuyDownAnalysis:
    principal = program_loan_amount(loan, program)
    original = monthly_payment(principal, program.rate, program.term)
    reduced = monthly_payment(principal, effective_rate(program), program.term)
    savings = original - reduced
    cost = nz(program.buyDownCost)
    break_even = cost / savings if savings > 0 and cost > 0 else None
    return BuyDownAnalysis(
        original_payment=original,
        buy_down_payment=reduced,
        monthly_savings=savings,
        rate_reduction=rate_reduction(program) if program.buyDown else 0.0,
        break_even_months=break_even,
    )


def savings_vs_current(program: Program, piti: float) -> Optional[float]:
    """Prior payment minus the new one; positive is a saving."""

    previous = nz(program.previousMonthlyPITI)
    if previous <= 0:
        return None
    return previous - nz(piti)


def arm_details(program: Program) -> Optional[ArmDetails]:
    fixed_years = ARM_TABLE.get(program.type)
    if fixed_years is None:
        return None
    return ArmDetails(
        name=PROGRAM_TYPE_NAMES[program.type],
        fixed_years=fixed_years,
        caps=ARM_CAPS,
        max_rate=nz(program.rate) + ARM_LIFETIME_CAP_PCT,
    )


def evaluate_program(
    loan: LoanData, program: Program, selection: Optional[ProgramDebtSelection] = None
) -> ProgramRow:
    payment = payment_breakdown(loan, program)
    return ProgramRow(
        program=program.model_copy(deep=True),
        effective_rate=effective_rate(program),
        loan_amount=program_loan_amount(loan, program),
        payment=payment,
        dti=dti(loan, program, selection),
        buy_down=buy_down_analysis(loan, program) if program.buyDown else None,
        savings_vs_current=(
            savings_vs_current(program, payment.total)
            if loan.loanType == "refinance"
            else None
        ),
        arm=arm_details(program),
    )
