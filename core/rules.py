from __future__ import annotations
from typing import Literal, List, Dict, Any, Optional
from pydantic import BaseModel, Field

from loancomp.calculators import nz
from loancomp.models import ComparisonResult, LoanData
from loancomp.presets import LONG_BREAK_EVEN_MONTHS, LOAN_TERMS, PROGRAM_PRESETS


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def _input_rules(loan: LoanData) -> List[RuleResult]:
    res: List[RuleResult] = []

    if loan.loanType == "purchase":
        price = nz(loan.purchasePrice)
        down = nz(loan.downPayment)
        if price <= 0:
            res.append(
                RuleResult(
                    code="PURCHASE_PRICE_REQUIRED",
                    severity="critical",
                    message="Enter a purchase price to size the loan.",
                )
            )
        if down < 0:
            res.append(
                RuleResult(
                    code="DOWN_PAYMENT_NEGATIVE",
                    severity="critical",
                    message="Down payment cannot be negative.",
                    context={"down_payment": down},
                )
            )
        elif price > 0 and down >= price:
            res.append(
                RuleResult(
                    code="DOWN_PAYMENT_TOO_LARGE",
                    severity="critical",
                    message="Down payment covers the full purchase price; there is no loan.",
                    context={"down_payment": down, "purchase_price": price},
                )
            )
    elif nz(loan.refinanceLoanAmount) <= 0:
        res.append(
            RuleResult(
                code="REFI_AMOUNT_REQUIRED",
                severity="critical",
                message="Enter the refinance loan amount.",
            )
        )

    if nz(loan.grossMonthlyIncome) <= 0:
        res.append(
            RuleResult(
                code="NO_INCOME",
                severity="warn",
                message="No income entered; DTI is not meaningful.",
            )
        )

    if not any(p.selected for p in loan.programs):
        res.append(
            RuleResult(
                code="NO_PROGRAMS",
                severity="warn",
                message="No loan programs are selected for comparison.",
            )
        )

    for p in loan.programs:
        if nz(p.rate) <= 0:
            res.append(
                RuleResult(
                    code="PROGRAM_RATE_INVALID",
                    severity="warn",
                    message=f"{p.name or p.type}: rate must be greater than zero.",
                    context={"program_id": p.id, "rate": p.rate},
                )
            )
        if p.term not in LOAN_TERMS:
            res.append(
                RuleResult(
                    code="PROGRAM_TERM_INVALID",
                    severity="warn",
                    message=f"{p.name or p.type}: term must be one of {', '.join(map(str, LOAN_TERMS))} years.",
                    context={"program_id": p.id, "term": p.term},
                )
            )

    for d in loan.debts:
        if nz(d.balance) < 0 or nz(d.monthlyPayment) < 0:
            res.append(
                RuleResult(
                    code="DEBT_NEGATIVE",
                    severity="warn",
                    message=f"{d.creditor or 'Debt'}: balance and payment cannot be negative.",
                    context={"debt_id": d.id},
                )
            )
    return res


def _result_rules(loan: LoanData, result: ComparisonResult) -> List[RuleResult]:
    res: List[RuleResult] = []
    income = nz(loan.grossMonthlyIncome)

    for row in result.rows:
        p = row.program
        targets = PROGRAM_PRESETS.get(p.type, PROGRAM_PRESETS["conventional"])
        label = p.name or p.type
        if income > 0 and row.dti.housingDTI > targets["FE"]:
            res.append(
                RuleResult(
                    code="HOUSING_RATIO_OVER_LIMIT",
                    severity="warn",
                    message=f"{label}: housing ratio exceeds program limit.",
                    context={"program_id": p.id, "actual": row.dti.housingDTI, "limit": targets["FE"]},
                )
            )
        if income > 0 and row.dti.totalDTI > targets["BE"]:
            res.append(
                RuleResult(
                    code="TOTAL_DTI_OVER_LIMIT",
                    severity="warn",
                    message=f"{label}: total DTI exceeds program limit.",
                    context={"program_id": p.id, "actual": row.dti.totalDTI, "limit": targets["BE"]},
                )
            )
        if row.buy_down is not None:
            months = row.buy_down.break_even_months
            if months is not None and months > LONG_BREAK_EVEN_MONTHS:
                res.append(
                    RuleResult(
                        code="BUYDOWN_LONG_BREAKEVEN",
                        severity="info",
                        message=f"{label}: buy-down takes more than {LONG_BREAK_EVEN_MONTHS} months to break even.",
                        context={"program_id": p.id, "months": months},
                    )
                )

    if any(row.monthly_mi > 0 for row in result.rows):
        res.append(
            RuleResult(
                code="MI_REQUIRED",
                severity="info",
                message="Mortgage insurance applies to this loan.",
            )
        )
    return res


def evaluate_rules(loan: LoanData, result: Optional[ComparisonResult] = None) -> List[RuleResult]:
    """Advisory checks on the inputs and, when given, on an evaluated comparison."""
    res = _input_rules(loan)
    if result is not None:
        res += _result_rules(loan, result)
    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
