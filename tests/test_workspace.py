import pytest

from loancomp.codec import decode
from loancomp.models import LoanData
from loancomp.workspace import DebtNotFoundError, LoanWorkspace, ProgramNotFoundError


def test_add_program_defaults_and_names():
    ws = LoanWorkspace()
    first = ws.add_program()
    assert first.type == "conventional"
    assert first.rate == 7.0
    assert first.effectiveRate == 7.0
    assert first.term == 30
    assert first.selected and not first.buyDown
    assert first.name == "Conventional Fixed 30yr"
    second = ws.add_program()
    assert second.name == "Conventional Fixed 30yr (2)"
    arm = ws.add_program(type="5arm", rate=6.25)
    assert arm.name == "5/1 ARM 30yr"
    assert arm.effectiveRate == 6.25


def test_program_ids_increase_and_are_not_reused():
    ws = LoanWorkspace()
    a = ws.add_program()
    b = ws.add_program()
    assert b.id > a.id
    ws.remove_program(b.id)
    c = ws.add_program()
    assert c.id > b.id


def test_ids_continue_past_loaded_programs():
    loan = LoanData(programs=[{"id": 10**15, "rate": 6.0}])
    ws = LoanWorkspace(loan)
    assert ws.add_program().id > 10**15


def test_update_program_regenerates_name_on_type_change():
    ws = LoanWorkspace()
    p = ws.add_program()
    updated = ws.update_program(p.id, type="fha", term=15)
    assert updated.name == "FHA 15yr"
    renamed = ws.update_program(p.id, name="Best offer")
    assert renamed.name == "Best offer"
    assert ws.update_program(p.id, rate=6.5).name == "Best offer"


def test_renamed_programs_keep_unique_names():
    ws = LoanWorkspace()
    first = ws.add_program()
    second = ws.add_program(type="va")
    assert ws.update_program(first.id, type="fha", term=15).name == "FHA 15yr"
    assert ws.update_program(second.id, type="fha", term=15).name == "FHA 15yr (2)"
    # Re-sending the same term must not collide with the program's own name.
    assert ws.update_program(first.id, term=15).name == "FHA 15yr"


def test_effective_rate_tracks_buy_down():
    ws = LoanWorkspace()
    p = ws.add_program()
    p = ws.update_program(p.id, rate=6.8)
    assert p.effectiveRate == 6.8
    p = ws.update_program(p.id, buyDown=True, effectiveRate=6.3, buyDownCost=4000)
    assert p.rateReduction == pytest.approx(0.5)
    p = ws.update_program(p.id, rate=7.0)
    assert p.effectiveRate == pytest.approx(6.5)
    assert p.rateReduction == pytest.approx(0.5)
    p = ws.update_program(p.id, buyDown=False)
    assert p.effectiveRate == 7.0
    assert p.rateReduction == 0


def test_preferred_cleared_on_deselect_and_remove():
    ws = LoanWorkspace()
    a = ws.add_program()
    b = ws.add_program()
    ws.set_preferred(a.id)
    assert ws.evaluate().preferred.program.id == a.id
    ws.update_program(a.id, selected=False)
    assert ws.preferred_program_id is None
    ws.set_preferred(b.id)
    ws.remove_program(b.id)
    assert ws.preferred_program_id is None
    with pytest.raises(ProgramNotFoundError):
        ws.set_preferred(b.id)


def test_move_program():
    ws = LoanWorkspace()
    ids = [ws.add_program().id for _ in range(3)]
    ws.move_program(0, 2)
    assert [p.id for p in ws.programs] == [ids[1], ids[2], ids[0]]
    ws.move_program(0, 5)
    ws.move_program(-1, 0)
    assert [p.id for p in ws.programs] == [ids[1], ids[2], ids[0]]
    ws.move_program_up(ids[0])
    assert [p.id for p in ws.programs] == [ids[1], ids[0], ids[2]]
    ws.move_program_up(ids[1])
    ws.move_program_down(ids[2])
    assert [p.id for p in ws.programs] == [ids[1], ids[0], ids[2]]


def test_debt_selection_lifecycle():
    ws = LoanWorkspace()
    p = ws.add_program()
    car = ws.add_debt("Auto", 15000, 400)
    card = ws.add_debt("Visa", 2000, 75, include_in_dti=False)
    assert card.id == car.id + 1
    ws.set_program_debts(p.id, [card.id])
    assert ws.evaluate().rows[0].dti.debtPayments == 75
    ws.remove_debt(card.id)
    assert ws.loan_data.debt_selection(p.id).selectedDebtIds == []
    ws.set_program_debts(p.id, None)
    assert ws.evaluate().rows[0].dti.debtPayments == 400
    with pytest.raises(DebtNotFoundError):
        ws.set_program_debts(p.id, [999])
    with pytest.raises(DebtNotFoundError):
        ws.remove_debt(999)


def test_remove_program_drops_its_debt_selection():
    ws = LoanWorkspace()
    p = ws.add_program()
    debt = ws.add_debt("Auto", 1000, 100)
    ws.set_program_debts(p.id, [debt.id])
    ws.remove_program(p.id)
    assert ws.loan_data.programDebtSelections == []
    with pytest.raises(ProgramNotFoundError):
        ws.update_program(p.id, rate=1.0)


def test_payload_round_trip():
    ws = LoanWorkspace()
    p = ws.add_program(type="va")
    ws.set_preferred(p.id)
    result = decode(ws.to_payload("VA option"))
    restored = LoanWorkspace.from_scenario(result.value)
    assert restored.preferred_program_id == p.id
    assert restored.loan_data == ws.loan_data
    assert result.value.name == "VA option"


def test_moving_changes_order_but_not_values():
    ws = LoanWorkspace(LoanData(purchasePrice=500000, downPayment=100000, grossMonthlyIncome=10000))
    ids = [ws.add_program(rate=rate).id for rate in (6.0, 6.5, 7.0)]
    before = {r.program.id: r for r in ws.evaluate().rows}
    ws.move_program(2, 0)
    after = ws.evaluate().rows
    assert [r.program.id for r in after] == [ids[2], ids[0], ids[1]]
    assert all(r == before[r.program.id] for r in after)
