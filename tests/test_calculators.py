import math

import pytest

from loancomp.calculators import (
    compute_ltv,
    down_payment_percent,
    dti,
    loan_amount,
    monthly_mi,
    monthly_payment,
    nz,
    requires_mi,
    total_refinanced_debts,
    total_refinanced_monthly_payments,
    total_selected_monthly_debts,
)
from loancomp.models import Debt, LoanData


def test_monthly_payment_standard_amortization():
    assert monthly_payment(300000, 6.0, 30) == pytest.approx(1798.65, abs=0.01)
    assert monthly_payment(400000, 7.0, 30) == pytest.approx(2661.21, abs=0.01)


def test_zero_rate_is_straight_line():
    assert monthly_payment(120000, 0, 10) == 1000


def test_degenerate_inputs_return_zero():
    assert monthly_payment(0, 6.0, 30) == 0
    assert monthly_payment(-5000, 6.0, 30) == 0
    assert monthly_payment(100000, 6.0, 0) == 0
    assert monthly_payment(None, None, None) == 0


def test_nz_coerces_blank_values():
    assert nz(None) == 0.0
    assert nz("abc") == 0.0
    assert nz(float("nan")) == 0.0
    assert nz(math.inf, 1.0) == 1.0
    assert nz("12.5") == 12.5


def test_loan_amount_by_loan_type():
    purchase = LoanData(loanType="purchase", purchasePrice=500000, downPayment=100000)
    refi = LoanData(loanType="refinance", purchasePrice=500000, refinanceLoanAmount=320000)
    assert loan_amount(purchase) == 400000
    assert loan_amount(refi) == 320000
    assert down_payment_percent(purchase) == pytest.approx(20.0)
    assert down_payment_percent(LoanData(purchasePrice=0, downPayment=10)) == 0.0


def test_purchase_mi_below_twenty_percent_down():
    at_twenty = LoanData(purchasePrice=500000, downPayment=100000)
    below = LoanData(purchasePrice=300000, downPayment=30000)
    assert not requires_mi(at_twenty)
    assert monthly_mi(at_twenty, loan_amount(at_twenty)) == 0
    assert requires_mi(below)
    assert monthly_mi(below, loan_amount(below)) == pytest.approx(270000 * 0.005 / 12)


def test_refinance_mi_follows_ltv():
    loan = LoanData(loanType="refinance", refinanceLoanAmount=300000, currentPropertyValue=350000)
    assert compute_ltv(350000, 300000) == pytest.approx(85.714, abs=0.001)
    assert requires_mi(loan)
    assert monthly_mi(loan, 300000) == pytest.approx(125.0)
    assert not requires_mi(loan, 250000)
    assert monthly_mi(loan, 250000) == 0


def test_refinance_without_property_value_has_no_mi():
    loan = LoanData(loanType="refinance", refinanceLoanAmount=300000)
    assert compute_ltv(0, 300000) == 0
    assert not requires_mi(loan)


def test_debt_totals():
    debts = [
        Debt(id=1, balance=5000, monthlyPayment=200),
        Debt(id=2, balance=12000, monthlyPayment=350, includeInDTI=False, willBeRefinanced=True),
        Debt(id=3, balance=800, monthlyPayment=50, willBeRefinanced=True),
    ]
    assert total_selected_monthly_debts(debts) == 250
    assert total_refinanced_debts(debts) == 12800
    assert total_refinanced_monthly_payments(debts) == 400


def test_dti_percentages_and_zero_income():
    assert dti(3000, 4000, 10000) == (30.0, 40.0)
    assert dti(3000, 4000, 0) == (0.0, 0.0)


def test_mi_boundaries():
    assert not requires_mi(LoanData(purchasePrice=400000, downPayment=80000))
    assert requires_mi(LoanData(purchasePrice=400000, downPayment=79999))
    at_eighty = LoanData(loanType="refinance", refinanceLoanAmount=320000, currentPropertyValue=400000)
    assert not requires_mi(at_eighty)
    at_eighty.currentPropertyValue = 399000
    assert requires_mi(at_eighty)
