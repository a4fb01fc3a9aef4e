"""Editable loan workspace: the program list, debts and the preferred program."""
from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from loancomp import codec
from loancomp.comparison import evaluate
from loancomp.models import ComparisonResult, Debt, LoanData, Program, ProgramDebtSelection
from loancomp.presets import PROGRAM_DEFAULTS, PROGRAM_TYPE_NAMES

logger = logging.getLogger(__name__)


class ProgramNotFoundError(LookupError):
    pass


class DebtNotFoundError(LookupError):
    pass


def program_name(program_type: str, term: int) -> str:
    return f"{PROGRAM_TYPE_NAMES.get(program_type, program_type)} {term}yr"


class LoanWorkspace:
    """Holds one ``LoanData`` and applies the edits the UI makes to it.

    ``preferred_program_id`` lives here rather than on ``Program`` so at most
    one program is ever preferred.  Program ids only grow, so an id freed by
    ``remove_program`` is never handed out again by the same workspace.
    """

    def __init__(
        self,
        loan_data: Optional[LoanData] = None,
        preferred_program_id: Optional[int] = None,
        last_program_id: int = 0,
    ) -> None:
        self.loan_data = loan_data if loan_data is not None else LoanData()
        self.preferred_program_id = preferred_program_id
        self.last_program_id = max(
            [last_program_id] + [p.id for p in self.loan_data.programs]
        )

    # -- persistence ------------------------------------------------------

    @classmethod
    def from_scenario(cls, scenario: codec.DecodedScenario) -> "LoanWorkspace":
        return cls(scenario.loan_data, scenario.preferred_program_id)

    def to_payload(self, name: Optional[str] = None) -> dict:
        return codec.encode(self.loan_data, self.preferred_program_id, name)

    # -- programs ---------------------------------------------------------

    @property
    def programs(self):
        return self.loan_data.programs

    def _index(self, program_id: int) -> int:
        for idx, program in enumerate(self.programs):
            if program.id == program_id:
                return idx
        raise ProgramNotFoundError(f"Program {program_id} not found")

    def _next_program_id(self) -> int:
        self.last_program_id = max(int(time.time() * 1000), self.last_program_id + 1)
        return self.last_program_id

    def add_program(self, **overrides) -> Program:
        data = dict(PROGRAM_DEFAULTS)
        data.update(overrides)
        if "effectiveRate" not in overrides:
            data["effectiveRate"] = data["rate"]
        if not data.get("name"):
            data["name"] = self._unique_name(program_name(data["type"], data["term"]))
        data["id"] = self._next_program_id()
        program = Program.model_validate(data)
        self.programs.append(program)
        logger.debug("Added program %s (%s)", program.id, program.name)
        return program

    def _unique_name(self, base: str, exclude_id: Optional[int] = None) -> str:
        taken = {p.name for p in self.programs if p.id != exclude_id}
        if base not in taken:
            return base
        n = 2
        while f"{base} ({n})" in taken:
            n += 1
        return f"{base} ({n})"

    def update_program(self, program_id: int, **changes) -> Program:
        idx = self._index(program_id)
        current = self.programs[idx]
        data = current.model_dump()
        data.update(changes)
        data["id"] = current.id
        candidate = Program.model_validate(data)

        updates = {}
        if "type" in changes or "term" in changes:
            updates["name"] = self._unique_name(
                program_name(candidate.type, candidate.term), exclude_id=program_id
            )
        effective = candidate.effectiveRate
        if not candidate.buyDown:
            effective = candidate.rate
        elif "rate" in changes and "effectiveRate" not in changes and current.rateReduction:
            effective = candidate.rate - current.rateReduction
        updates["effectiveRate"] = effective
        updates["rateReduction"] = max(candidate.rate - effective, 0.0)

        updated = candidate.model_copy(update=updates)
        self.programs[idx] = updated
        if not updated.selected and self.preferred_program_id == program_id:
            self.preferred_program_id = None
        return updated

    def remove_program(self, program_id: int) -> Program:
        removed = self.programs.pop(self._index(program_id))
        self.loan_data.programDebtSelections = [
            s for s in self.loan_data.programDebtSelections if s.programId != program_id
        ]
        if self.preferred_program_id == program_id:
            self.preferred_program_id = None
        logger.debug("Removed program %s", program_id)
        return removed

    def move_program(self, from_index: int, to_index: int) -> None:
        count = len(self.programs)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return
        if from_index == to_index:
            return
        program = self.programs.pop(from_index)
        self.programs.insert(to_index, program)

    def move_program_up(self, program_id: int) -> None:
        idx = self._index(program_id)
        self.move_program(idx, idx - 1)

    def move_program_down(self, program_id: int) -> None:
        idx = self._index(program_id)
        self.move_program(idx, idx + 1)

    def set_preferred(self, program_id: Optional[int]) -> None:
        if program_id is not None:
            self._index(program_id)
        self.preferred_program_id = program_id

    # -- debts ------------------------------------------------------------

    @property
    def debts(self):
        return self.loan_data.debts

    def _debt_index(self, debt_id: int) -> int:
        for idx, debt in enumerate(self.debts):
            if debt.id == debt_id:
                return idx
        raise DebtNotFoundError(f"Debt {debt_id} not found")

    def next_debt_id(self) -> int:
        return max([d.id for d in self.debts], default=0) + 1

    def add_debt(
        self,
        creditor: str = "",
        balance: float = 0.0,
        monthly_payment: float = 0.0,
        include_in_dti: bool = True,
        will_be_refinanced: bool = False,
    ) -> Debt:
        debt = Debt(
            id=self.next_debt_id(),
            creditor=creditor,
            balance=balance,
            monthlyPayment=monthly_payment,
            includeInDTI=include_in_dti,
            willBeRefinanced=will_be_refinanced,
        )
        self.debts.append(debt)
        return debt

    def extend_debts(self, debts: Iterable[Debt]) -> None:
        self.debts.extend(debts)

    def update_debt(self, debt_id: int, **changes) -> Debt:
        idx = self._debt_index(debt_id)
        data = self.debts[idx].model_dump()
        data.update(changes)
        data["id"] = debt_id
        updated = Debt.model_validate(data)
        self.debts[idx] = updated
        return updated

    def remove_debt(self, debt_id: int) -> Debt:
        removed = self.debts.pop(self._debt_index(debt_id))
        for selection in self.loan_data.programDebtSelections:
            if debt_id in selection.selectedDebtIds:
                selection.selectedDebtIds = [
                    i for i in selection.selectedDebtIds if i != debt_id
                ]
        return removed

    def set_program_debts(self, program_id: int, debt_ids: Optional[Iterable[int]]) -> None:
        """Pick the debts counted in one program's DTI; ``None`` restores the default."""

        self._index(program_id)
        if debt_ids is not None:
            debt_ids = list(debt_ids)
        selections = [
            s for s in self.loan_data.programDebtSelections if s.programId != program_id
        ]
        if debt_ids is not None:
            known = {d.id for d in self.debts}
            for debt_id in debt_ids:
                if debt_id not in known:
                    raise DebtNotFoundError(f"Debt {debt_id} not found")
            selections.append(
                ProgramDebtSelection(programId=program_id, selectedDebtIds=list(debt_ids))
            )
        self.loan_data.programDebtSelections = selections

    # -- evaluation -------------------------------------------------------

    def evaluate(self) -> ComparisonResult:
        return evaluate(self.loan_data, self.preferred_program_id)
