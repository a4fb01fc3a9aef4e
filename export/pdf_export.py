from __future__ import annotations
from html import escape
from typing import BinaryIO, Optional, Union

from reportlab.lib.pagesizes import LETTER, landscape
from reportlab.lib import colors
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet

from core.utils import format_currency, format_percent
from export.html_export import BUY_DOWN_NOTE
from export.tables import buy_down_frame, comparison_frame
from loancomp.models import ComparisonResult
from loancomp.presets import DISCLAIMER

GRID = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
    ('BOX', (0, 0), (-1, -1), 1, colors.black),
    ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ('FONTSIZE', (0, 0), (-1, -1), 8),
    ('VALIGN', (0, 0), (-1, -1), 'TOP'),
])


def _frame_rows(frame, index: bool) -> list[list]:
    header = ([frame.index.name or ""] if index else []) + [str(c) for c in frame.columns]
    body = []
    for label, values in frame.iterrows():
        body.append(([str(label)] if index else []) + [str(v) for v in values])
    return [header] + body


def build_comparison_pdf(out: Union[str, BinaryIO], result: ComparisonResult, branding: Optional[dict] = None):
    """Write the comparison, recommendation and buy-down tables to ``out``."""
    branding = branding or {}
    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(out, pagesize=landscape(LETTER), leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = []
    title = branding.get("title", "Loan Comparison")
    story += [Paragraph(f"<b>{escape(title)}</b>", styles['Title']), Spacer(1, 6)]
    if branding.get("mlo"):
        story.append(Paragraph(f"MLO: {escape(branding['mlo'])}  |  NMLS: {escape(str(branding.get('nmls', '')))}", styles['Normal']))
    if branding.get("contact"):
        story.append(Paragraph(f"Contact: {escape(branding['contact'])}", styles['Normal']))
    story += [Spacer(1, 12)]

    if result.rows:
        t = Table(_frame_rows(comparison_frame(result), index=True), hAlign='LEFT', repeatRows=1)
        t.setStyle(GRID)
        story += [Paragraph("<b>Comparison Results</b>", styles['Heading3']), Spacer(1, 6), t, Spacer(1, 12)]
    else:
        story += [Paragraph("No programs selected.", styles['Normal']), Spacer(1, 12)]

    row = result.preferred
    if row is not None:
        rec = [
            ["Preferred Recommendation", ""],
            ["Program", row.program.name],
            ["Rate", format_percent(row.effective_rate)],
            ["Loan Amount", format_currency(row.loan_amount)],
            ["Term", f"{row.program.term} years"],
            ["Estimated PITI", format_currency(row.monthly_piti)],
        ]
        if result.summary.loan_type == "refinance" and row.savings_vs_current is not None:
            label = "Savings vs current" if row.savings_vs_current >= 0 else "Increase vs current"
            rec.append([label, f"{format_currency(abs(row.savings_vs_current))}/mo"])
        t = Table(rec, hAlign='LEFT', colWidths=[200, 320])
        t.setStyle(GRID)
        story += [t, Spacer(1, 12)]

    buy_downs = buy_down_frame(result)
    if not buy_downs.empty:
        t = Table(_frame_rows(buy_downs, index=False), hAlign='LEFT')
        t.setStyle(GRID)
        story += [
            Paragraph("<b>Buy-Down Break-Even Analysis</b>", styles['Heading3']),
            Paragraph(f"<font size=8>{BUY_DOWN_NOTE}</font>", styles['Normal']),
            Spacer(1, 6), t, Spacer(1, 12),
        ]
    story += [Spacer(1, 12), Paragraph(f"<font size=8>{escape(DISCLAIMER)}</font>", styles['Normal'])]
    doc.build(story)
