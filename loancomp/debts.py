"""Bulk debt entry from pasted spreadsheet rows or CSV exports."""
from __future__ import annotations

import io
import logging
from typing import Iterable, List

import pandas as pd

from loancomp.calculators import nz
from loancomp.models import Debt

logger = logging.getLogger(__name__)


def _first_id(existing: Iterable[Debt]) -> int:
    return max([d.id for d in existing], default=0) + 1


def _parse_amount(value) -> float:
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "").strip()
    return nz(value)


def parse_debts_paste(text: str, existing: Iterable[Debt] = ()) -> List[Debt]:
    """Parse tab separated ``creditor, balance, monthly payment`` lines.

    This is the shape produced by copying rows out of a spreadsheet.  Lines
    with fewer than three cells are skipped and unreadable amounts become 0.
    """

    next_id = _first_id(existing)
    debts: List[Debt] = []
    for line in (text or "").strip().splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        debts.append(
            Debt(
                id=next_id + len(debts),
                creditor=parts[0].strip(),
                balance=_parse_amount(parts[1]),
                monthlyPayment=_parse_amount(parts[2]),
            )
        )
    return debts


def parse_debts_csv(text: str, existing: Iterable[Debt] = ()) -> List[Debt]:
    """Parse a CSV export whose first line is a header.

    Columns are read by position (creditor, balance, monthly payment) so the
    header wording does not matter.  Rows with more cells than the header
    usually come from an unquoted comma in the creditor name; the surplus
    cells are folded back into the creditor.  Unreadable files yield no debts.
    """

    if not (text or "").strip():
        return []
    try:
        width = len(pd.read_csv(io.StringIO(text), nrows=0, engine="python").columns)
        if width < 3:
            return []
        max_cells = max(line.count(",") + 1 for line in text.splitlines())
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            skiprows=1,
            names=list(range(max(width, max_cells))),
            dtype=object,
            keep_default_na=False,
            engine="python",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("Could not read debt CSV: %s", exc)
        return []

    next_id = _first_id(existing)
    debts: List[Debt] = []
    for values in df.itertuples(index=False, name=None):
        cells = [v for v in values if isinstance(v, str)]
        while len(cells) > width and not cells[-1].strip():
            cells.pop()
        if len(cells) < 3 or not any(c.strip() for c in cells):
            continue
        extra = max(len(cells) - width, 0)
        debts.append(
            Debt(
                id=next_id + len(debts),
                creditor=",".join(cells[: extra + 1]).strip(),
                balance=_parse_amount(cells[extra + 1]),
                monthlyPayment=_parse_amount(cells[extra + 2]),
            )
        )
    if len(debts) < len(df):
        logger.info("Skipped %d unreadable debt rows", len(df) - len(debts))
    return debts
