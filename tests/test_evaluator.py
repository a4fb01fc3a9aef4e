import pytest

from loancomp.calculators import monthly_payment
from loancomp.evaluator import (
    arm_details,
    buy_down_analysis,
    dti,
    evaluate_program,
    payment_breakdown,
    program_debt_payments,
    savings_vs_current,
)
from loancomp.models import Debt, LoanData, Program, ProgramDebtSelection


def _loan(**kw):
    base = dict(
        purchasePrice=500000,
        downPayment=100000,
        annualPropertyTax=6000,
        annualHomeInsurance=1800,
        grossMonthlyIncome=10000,
    )
    base.update(kw)
    return LoanData(**base)


def test_payment_breakdown_components():
    p = Program(id=1, rate=7.0, effectiveRate=7.0, term=30)
    b = payment_breakdown(_loan(), p)
    assert b.principal_interest == pytest.approx(2661.21, abs=0.01)
    assert b.taxes == 500
    assert b.insurance == 150
    assert b.mi == 0
    assert b.total == pytest.approx(3311.21, abs=0.01)


def test_buy_down_uses_effective_rate_and_break_even():
    loan = LoanData(purchasePrice=375000, downPayment=75000)
    p = Program(id=1, rate=7.0, effectiveRate=6.5, buyDown=True, buyDownCost=6000)
    analysis = buy_down_analysis(loan, p)
    original = monthly_payment(300000, 7.0, 30)
    reduced = monthly_payment(300000, 6.5, 30)
    assert analysis.monthly_savings == pytest.approx(original - reduced)
    assert analysis.rate_reduction == pytest.approx(0.5)
    assert analysis.break_even_months == pytest.approx(6000 / (original - reduced))
    assert 60 < analysis.break_even_months < 61
    assert analysis.break_even_whole_months == 61
    assert payment_breakdown(loan, p).principal_interest == pytest.approx(reduced)


def test_buy_down_without_savings_has_no_break_even():
    loan = LoanData(purchasePrice=375000, downPayment=75000)
    free = Program(id=1, rate=7.0, effectiveRate=6.5, buyDown=True, buyDownCost=0)
    none = Program(id=2, rate=7.0, effectiveRate=7.0, buyDown=True, buyDownCost=3000)
    assert buy_down_analysis(loan, free).break_even_months is None
    assert buy_down_analysis(loan, none).break_even_months is None


def test_inactive_buy_down_ignores_effective_rate():
    loan = _loan()
    p = Program(id=1, rate=7.0, effectiveRate=5.0, buyDown=False)
    assert payment_breakdown(loan, p).principal_interest == pytest.approx(monthly_payment(400000, 7.0, 30))


def test_dti_with_zero_income_still_reports_payments():
    loan = _loan(grossMonthlyIncome=0, debts=[Debt(id=1, monthlyPayment=400)])
    result = dti(loan, Program(id=1, rate=7.0, effectiveRate=7.0))
    assert result.housingDTI == 0
    assert result.totalDTI == 0
    assert result.housingPayment == pytest.approx(3311.21, abs=0.01)
    assert result.debtPayments == 400


def test_program_debt_selection_overrides_include_flag():
    debts = [
        Debt(id=1, monthlyPayment=400),
        Debt(id=2, monthlyPayment=250, includeInDTI=False),
    ]
    loan = _loan(debts=debts)
    p = Program(id=7, rate=7.0, effectiveRate=7.0)
    assert program_debt_payments(loan, p) == 400
    selection = ProgramDebtSelection(programId=7, selectedDebtIds=[2])
    assert program_debt_payments(loan, p, selection) == 250
    loan.programDebtSelections = [ProgramDebtSelection(programId=7, selectedDebtIds=[1, 2])]
    assert program_debt_payments(loan, p) == 650


def test_refinance_override_amount_changes_mi():
    loan = LoanData(loanType="refinance", refinanceLoanAmount=300000, currentPropertyValue=350000)
    base = evaluate_program(loan, Program(id=1, rate=6.0, effectiveRate=6.0))
    smaller = evaluate_program(
        loan, Program(id=2, rate=6.0, effectiveRate=6.0, overrideLoanAmount=250000)
    )
    assert base.loan_amount == 300000
    assert base.monthly_mi == pytest.approx(125.0)
    assert smaller.loan_amount == 250000
    assert smaller.monthly_mi == 0


def test_savings_vs_current_only_for_refinance():
    p = Program(id=1, rate=6.0, effectiveRate=6.0, previousMonthlyPITI=2500)
    refi = LoanData(loanType="refinance", refinanceLoanAmount=300000)
    purchase = LoanData(purchasePrice=375000, downPayment=75000)
    row = evaluate_program(refi, p)
    assert row.savings_vs_current == pytest.approx(2500 - row.monthly_piti)
    assert evaluate_program(purchase, p).savings_vs_current is None
    assert savings_vs_current(Program(id=2), 2000) is None


def test_arm_details():
    assert arm_details(Program(id=1, type="conventional")) is None
    details = arm_details(Program(id=2, type="5arm", rate=6.25))
    assert details.name == "5/1 ARM"
    assert details.fixed_years == 5
    assert details.caps == "2-2-5"
    assert details.max_rate == pytest.approx(11.25)


def test_evaluate_program_does_not_share_program():
    p = Program(id=1, rate=7.0, effectiveRate=7.0)
    row = evaluate_program(_loan(), p)
    p.rate = 3.0
    assert row.program.rate == 7.0


def test_purchase_mi_is_shared_by_every_program():
    loan = LoanData(
        purchasePrice=400000,
        downPayment=40000,
        programs=[
            Program(id=1, rate=6.0, effectiveRate=6.0),
            Program(id=2, rate=6.0, effectiveRate=6.0, overrideLoanAmount=200000),
        ],
    )
    rows = [evaluate_program(loan, p) for p in loan.programs]
    assert rows[0].monthly_mi == pytest.approx(360000 * 0.005 / 12)
    assert rows[1].monthly_mi == rows[0].monthly_mi
    assert rows[1].loan_amount == 200000
