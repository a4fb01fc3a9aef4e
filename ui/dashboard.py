import io

import streamlit as st

from core.rules import has_blocking
from core.utils import format_break_even, format_currency, format_percent
from export.html_export import build_comparison_html, html_to_text
from export.pdf_export import build_comparison_pdf
from export.tables import buy_down_frame, comparison_frame
from loancomp.presets import DISCLAIMER


def render_rule_results(rule_results):
    if not rule_results:
        st.success("No warnings.")
        return
    for r in rule_results:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")


def render_comparison(result, rule_results):
    """Render the comparison table, recommendation and buy-down analysis."""
    st.header("Comparison Results")
    summary = result.summary
    cols = st.columns(4)
    cols[0].metric("Loan Amount", format_currency(summary.loan_amount))
    if summary.loan_type == "purchase":
        cols[1].metric("Down Payment", format_percent(summary.down_payment_percent, 1))
    else:
        cols[1].metric("LTV", format_percent(summary.loan_to_value, 1))
    cols[2].metric("Programs Compared", f"{summary.selected_programs} of {summary.total_programs}")
    cols[3].metric("Average Rate", format_percent(summary.average_rate))

    if not result.rows:
        st.info("No programs selected.")
    else:
        st.table(comparison_frame(result))

    row = result.preferred
    if row is not None:
        st.subheader("Preferred Recommendation")
        st.markdown(
            f"**{row.program.name}** at {format_percent(row.effective_rate)} for "
            f"{row.program.term} years: estimated PITI {format_currency(row.monthly_piti)}"
        )
        if summary.loan_type == "refinance" and row.savings_vs_current is not None:
            diff = row.savings_vs_current
            label = "Savings vs current" if diff >= 0 else "Increase vs current"
            st.caption(f"{label}: {format_currency(abs(diff))}/mo")

    buy_downs = buy_down_frame(result)
    if not buy_downs.empty:
        st.subheader("Buy-Down Break-Even Analysis")
        st.table(buy_downs)
        for r in result.buy_down_rows:
            st.caption(
                f"{r.program.name}: recovers the upfront cost in "
                f"{format_break_even(r.buy_down.break_even_whole_months)}"
            )

    st.divider()
    render_rule_results(rule_results)


def render_exports(result, rule_results, branding=None):
    st.write("**Disclaimer**")
    st.caption(DISCLAIMER)
    if has_blocking(rule_results):
        st.error("Resolve the critical warnings above to enable exports.")
        return
    html_doc = build_comparison_html(result)
    c1, c2 = st.columns(2)
    c1.download_button(
        "Download HTML",
        data=html_doc.encode("utf-8"),
        file_name="loan_comparison.html",
        mime="text/html",
    )
    buf = io.BytesIO()
    build_comparison_pdf(buf, result, branding)
    c2.download_button(
        "Download PDF",
        data=buf.getvalue(),
        file_name="loan_comparison.pdf",
        mime="application/pdf",
    )
    with st.expander("Copy as text"):
        st.code(html_to_text(html_doc), language=None)
