"""HTML export of a comparison, suitable for pasting into an email."""
from __future__ import annotations

import html
import re

from core.utils import format_currency, format_percent
from export.tables import buy_down_frame, comparison_frame
from loancomp.models import ComparisonResult
from loancomp.presets import DISCLAIMER

BUY_DOWN_NOTE = (
    "A rate buy-down is an upfront fee paid at closing to lower the interest rate "
    "and monthly payment. The break-even point estimates how long it takes for "
    "monthly savings to recoup the upfront cost."
)


def _table(frame, index: bool) -> str:
    # to_html escapes cell text and labels.
    return frame.to_html(index=index, border=1, classes="comparison", na_rep="N/A")


def _recommendation_html(result: ComparisonResult) -> str:
    row = result.preferred
    if row is None:
        return "<div><em>No preferred program selected.</em></div>"
    p = row.program
    if p.buyDown:
        rate = f"<s>{format_percent(p.rate)}</s> {format_percent(row.effective_rate)}"
    else:
        rate = format_percent(p.rate)
    cells = [
        ("Program", html.escape(p.name)),
        ("Rate", rate),
        ("Loan Amount", format_currency(row.loan_amount)),
        ("Term", f"{p.term} years"),
        ("Estimated PITI", format_currency(row.monthly_piti)),
    ]
    if result.summary.loan_type == "refinance" and row.savings_vs_current is not None:
        label = "Savings vs current" if row.savings_vs_current >= 0 else "Increase vs current"
        cells.append((label, f"{format_currency(abs(row.savings_vs_current))}/mo"))
    body = "".join(f"<tr><td>{k}</td><td>{v}</td></tr>" for k, v in cells)
    return (
        '<table border="1" class="recommendation">'
        "<tr><th>Preferred Recommendation</th><th></th></tr>"
        f"{body}</table>"
    )


def build_comparison_html(result: ComparisonResult) -> str:
    """Comparison table, preferred recommendation and buy-down break-even."""
    parts = ["<div>", "<h2>Comparison Results</h2>"]
    if result.rows:
        parts.append(_table(comparison_frame(result), index=True))
    else:
        parts.append("<div>No programs selected.</div>")
    parts.append(_recommendation_html(result))
    buy_downs = buy_down_frame(result)
    if not buy_downs.empty:
        parts += [
            "<h3>Buy-Down Break-Even Analysis</h3>",
            f"<p>{BUY_DOWN_NOTE}</p>",
            _table(buy_downs, index=False),
        ]
    parts += [f"<p><small>{html.escape(DISCLAIMER)}</small></p>", "</div>"]
    return "\n".join(parts)


_BLOCK_END = re.compile(r"</(tr|p|h2|h3|div|table)>", re.IGNORECASE)
_CELL_END = re.compile(r"</t[dh]>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def html_to_text(markup: str) -> str:
    """Plain text rendering of exported HTML for the clipboard."""
    text = _BLOCK_END.sub("\n", markup)
    text = _CELL_END.sub("\t", text)
    text = html.unescape(_TAG.sub("", text))
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)
