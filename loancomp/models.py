from __future__ import annotations

import math
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from loancomp.presets import DEFAULT_DOWN_PAYMENT_PCT, DEFAULT_TERM_YEARS

ProgramType = Literal["conventional", "3arm", "5arm", "7arm", "fha", "va", "usda"]
LoanType = Literal["purchase", "refinance"]


class Program(BaseModel):
    id: int
    type: ProgramType = "conventional"
    name: str = ""
    rate: float = 0.0
    term: int = DEFAULT_TERM_YEARS
    selected: bool = True
    buyDown: bool = False
    buyDownCost: float = 0.0
    effectiveRate: float = 0.0
    rateReduction: Optional[float] = None
    overrideLoanAmount: Optional[float] = None
    previousMonthlyPITI: Optional[float] = None


class Debt(BaseModel):
    id: int = 0
    creditor: str = ""
    balance: float = 0.0
    monthlyPayment: float = 0.0
    includeInDTI: bool = True
    willBeRefinanced: bool = False


class ProgramDebtSelection(BaseModel):
    programId: int
    selectedDebtIds: List[int] = Field(default_factory=list)


class LoanData(BaseModel):
    loanType: LoanType = "purchase"
    purchasePrice: float = 0.0
    downPayment: float = 0.0
    downPaymentPercent: float = DEFAULT_DOWN_PAYMENT_PCT
    refinanceLoanAmount: float = 0.0
    currentPropertyValue: float = 0.0
    annualPropertyTax: float = 0.0
    annualHomeInsurance: float = 0.0
    grossMonthlyIncome: float = 0.0
    debts: List[Debt] = Field(default_factory=list)
    programs: List[Program] = Field(default_factory=list)
    programDebtSelections: List[ProgramDebtSelection] = Field(default_factory=list)

    def program(self, program_id) -> Optional[Program]:
        return next((p for p in self.programs if p.id == program_id), None)

    def debt_selection(self, program_id) -> Optional[ProgramDebtSelection]:
        return next(
            (s for s in self.programDebtSelections if s.programId == program_id), None
        )


# ---------------------------------------------------------------------------
# Computed results. These are snapshots: re-evaluate instead of mutating.
# ---------------------------------------------------------------------------


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)


class PaymentBreakdown(_Snapshot):
    principal_interest: float
    taxes: float
    insurance: float
    mi: float
    total: float


class DTIResult(_Snapshot):
    housingDTI: float
    totalDTI: float
    housingPayment: float
    debtPayments: float
    totalMonthlyObligations: float


class BuyDownAnalysis(_Snapshot):
    original_payment: float
    buy_down_payment: float
    monthly_savings: float
    rate_reduction: float
    break_even_months: Optional[float] = None

    @property
    def break_even_whole_months(self) -> Optional[int]:
        """Break-even rounded up to whole months, ``None`` when not applicable."""
        if self.break_even_months is None:
            return None
        return math.ceil(self.break_even_months)


class ArmDetails(_Snapshot):
    name: str
    fixed_years: int
    caps: str
    max_rate: float


class ProgramRow(_Snapshot):
    program: Program
    effective_rate: float
    loan_amount: float
    payment: PaymentBreakdown
    dti: DTIResult
    buy_down: Optional[BuyDownAnalysis] = None
    savings_vs_current: Optional[float] = None
    arm: Optional[ArmDetails] = None

    @property
    def monthly_pi(self) -> float:
        return self.payment.principal_interest

    @property
    def monthly_mi(self) -> float:
        return self.payment.mi

    @property
    def monthly_piti(self) -> float:
        return self.payment.total


class ComparisonSummary(_Snapshot):
    loan_type: LoanType
    loan_amount: float
    down_payment_percent: float
    loan_to_value: float
    requires_mi: bool
    total_selected_monthly_debts: float
    total_refinanced_debts: float
    total_refinanced_monthly_payments: float
    total_programs: int
    selected_programs: int
    average_rate: float


class ComparisonResult(_Snapshot):
    rows: List[ProgramRow]
    summary: ComparisonSummary
    preferred: Optional[ProgramRow] = None

    @property
    def selected_programs(self) -> List[Program]:
        return [r.program for r in self.rows]

    @property
    def buy_down_rows(self) -> List[ProgramRow]:
        return [
            r for r in self.rows if r.program.buyDown and r.program.buyDownCost > 0
        ]
