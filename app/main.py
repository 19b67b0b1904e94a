"""
Streamlit Frontend for Expense Tracker

This is the user interface for day-to-day expense entry and the
monthly reports.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Clear error messages in simple language
3. Visual feedback for all operations
4. No hidden actions (deleting everything asks first)
"""

from datetime import date

import streamlit as st

from expense_tracker.config import validate_all_settings
from expense_tracker.formatting import (
    format_date,
    format_inr,
    format_month,
    format_percentage,
)
from expense_tracker.models import BudgetStatus, ExpenseCategory, PaidBy, PaymentMethod
from expense_tracker.orchestrator import (
    AppComponents,
    BudgetFlow,
    ExpenseFlow,
    ReportFlow,
    create_app_components,
)
from expense_tracker.periods import current_month, previous_month
from expense_tracker.reports.charts import (
    create_category_bar_chart,
    create_category_pie_chart,
    create_daily_bar_chart,
    create_daily_line_chart,
    create_group_bar_chart,
    create_heatmap_calendar,
)
from expense_tracker.stores import ExpenseSortKey
from expense_tracker.validation import get_user_friendly_summary


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


STATUS_BOX = {
    BudgetStatus.SAFE: "success-box",
    BudgetStatus.WARNING: "warning-box",
    BudgetStatus.DANGER: "error-box",
}

NOT_SET = "Not specified"


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def _inr(amount) -> str:
    return format_inr(amount, symbol=get_components().settings.app.currency_symbol)


def main():
    """Main application entry point."""
    components = get_components()

    # Sidebar navigation
    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Expense", "📋 Expenses", "🎯 Budget", "📊 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    month = current_month()
    st.sidebar.markdown(f"**{format_month(month)}**")
    st.sidebar.markdown(
        f"Spent so far: **{_inr(components.expense_flow.store.monthly_total(month))}**"
    )

    if not components.expense_flow.store.last_write_ok:
        st.sidebar.warning("⚠️ Last change could not be saved to disk.")

    # Route to appropriate page
    if page == "➕ Add Expense":
        render_add_page(components.expense_flow)
    elif page == "📋 Expenses":
        render_expenses_page(components.expense_flow)
    elif page == "🎯 Budget":
        render_budget_page(components.budget_flow, components.report_flow)
    elif page == "📊 Reports":
        render_reports_page(components.report_flow)
    elif page == "⚙️ Settings":
        render_settings_page(components)


def _optional_select(label: str, enum_cls, current=None, key=None):
    options = [None] + list(enum_cls)
    index = options.index(current) if current in options else 0
    return st.selectbox(
        label,
        options=options,
        index=index,
        format_func=lambda x: NOT_SET if x is None else x.value,
        key=key,
    )


def _expense_form(prefix: str, expense=None) -> dict:
    """Form fields shared by the add and edit views."""
    col1, col2 = st.columns(2)
    with col1:
        amount = st.number_input(
            "Amount (₹)",
            min_value=0.0,
            step=10.0,
            value=float(expense.amount) if expense else 0.0,
            key=f"{prefix}_amount",
        )
        description = st.text_input(
            "Description",
            value=expense.description if expense else "",
            max_chars=200,
            key=f"{prefix}_description",
        )
        category = st.selectbox(
            "Category",
            options=list(ExpenseCategory),
            index=list(ExpenseCategory).index(expense.category) if expense else 0,
            format_func=lambda x: x.value,
            key=f"{prefix}_category",
        )
    with col2:
        expense_date = st.date_input(
            "Date",
            value=expense.date if expense else date.today(),
            key=f"{prefix}_date",
        )
        paid_by = _optional_select("Paid by", PaidBy, expense.paid_by if expense else None,
                                   key=f"{prefix}_paid_by")
        payment_method = _optional_select(
            "Payment method", PaymentMethod, expense.payment_method if expense else None,
            key=f"{prefix}_payment_method",
        )

    return {
        "amount": amount if amount else None,
        "description": description,
        "category": category,
        "date": expense_date,
        "paid_by": paid_by,
        "payment_method": payment_method,
    }


def _show_result(result, success_message: str):
    if result.is_valid:
        st.success(success_message)
        if result.issues:
            st.warning(get_user_friendly_summary(result))
    else:
        st.error(get_user_friendly_summary(result))


def render_add_page(flow: ExpenseFlow):
    """Render the add-expense page."""
    st.title("➕ Add Expense")
    st.markdown("Record what you spent.")

    with st.form("add_expense", clear_on_submit=True):
        values = _expense_form("add")
        submitted = st.form_submit_button("💾 Save Expense", type="primary")

    if submitted:
        result = flow.add_expense(values)
        if result.is_valid:
            expense = result.expense
            st.markdown(f"""
            <div class="success-box">
                <h3>✅ Expense Saved</h3>
                <p><strong>Amount:</strong> {_inr(expense.amount)}</p>
                <p><strong>Description:</strong> {expense.description}</p>
                <p><strong>Category:</strong> {expense.category.value}</p>
                <p><strong>Date:</strong> {format_date(expense.date)}</p>
            </div>
            """, unsafe_allow_html=True)
            if result.issues:
                st.warning(get_user_friendly_summary(result))
        else:
            st.error(get_user_friendly_summary(result))


def render_expenses_page(flow: ExpenseFlow):
    """Render the expense list with filters, edit and delete."""
    st.title("📋 Your Expenses")

    col1, col2, col3 = st.columns(3)
    with col1:
        category_filter = st.selectbox(
            "Filter by Category",
            options=[None] + list(ExpenseCategory),
            format_func=lambda x: "All Categories" if x is None else x.value,
        )
    with col2:
        search = st.text_input("Search description", placeholder="e.g. groceries")
    with col3:
        sort_key = st.selectbox(
            "Sort by",
            options=list(ExpenseSortKey),
            format_func=lambda x: x.value.title(),
        )

    expenses = flow.list_expenses(category_filter, search, sort_key)
    total = sum((e.amount for e in expenses), start=0)
    st.markdown(f"**{len(expenses)}** expenses · **{_inr(total)}**")
    st.markdown("---")

    if not expenses:
        st.info("📋 No expenses yet. Use the 'Add Expense' page to record your first one.")
        return

    editing = st.session_state.get("editing_id")

    for expense in expenses:
        with st.container():
            col1, col2, col3, col4 = st.columns([3, 2, 1, 1])
            with col1:
                st.markdown(f"**{expense.description}**")
                tags = [expense.category.value, format_date(expense.date)]
                if expense.paid_by:
                    tags.append(expense.paid_by.value)
                if expense.payment_method:
                    tags.append(expense.payment_method.value)
                st.caption(" · ".join(tags))
            with col2:
                st.markdown(f"**{_inr(expense.amount)}**")
            with col3:
                if st.button("✏️ Edit", key=f"edit_{expense.id}"):
                    st.session_state.editing_id = expense.id
                    st.rerun()
            with col4:
                if st.button("🗑️ Delete", key=f"delete_{expense.id}"):
                    flow.delete_expense(expense.id)
                    st.rerun()

            if editing == expense.id:
                with st.form(f"edit_form_{expense.id}"):
                    values = _expense_form(f"edit_{expense.id}", expense)
                    col_save, col_cancel = st.columns(2)
                    with col_save:
                        save = st.form_submit_button("💾 Save Changes", type="primary")
                    with col_cancel:
                        cancel = st.form_submit_button("❌ Cancel")
                if save:
                    result = flow.edit_expense(expense.id, values)
                    if result.is_valid:
                        st.session_state.editing_id = None
                        st.rerun()
                    st.error(get_user_friendly_summary(result))
                if cancel:
                    st.session_state.editing_id = None
                    st.rerun()

    st.markdown("---")
    with st.expander("⚠️ Danger zone"):
        confirm = st.checkbox("I understand this deletes every expense")
        if st.button("🗑️ Clear All Expenses", disabled=not confirm):
            removed = flow.clear_all()
            st.success(f"Removed {removed} expenses.")
            st.rerun()


def _month_options(count: int = 12) -> list[str]:
    months = [current_month()]
    while len(months) < count:
        months.append(previous_month(months[-1]))
    return months


def render_budget_page(budget_flow: BudgetFlow, report_flow: ReportFlow):
    """Render the monthly budget page."""
    st.title("🎯 Monthly Budget")

    month = st.selectbox("Month", options=_month_options(), format_func=format_month)
    current_budget = budget_flow.store.total_for_month(month)

    with st.form("budget_form"):
        amount = st.number_input(
            "Budget (₹)",
            min_value=0.0,
            step=500.0,
            value=float(current_budget),
        )
        submitted = st.form_submit_button("💾 Save Budget", type="primary")

    if submitted:
        result = budget_flow.set_budget(month, amount if amount else None)
        _show_result(result, f"Budget for {format_month(month)} saved.")

    evaluation = report_flow.monthly_report(month).budget
    if not evaluation.has_budget:
        st.info("No budget set for this month.")
    else:
        box = STATUS_BOX[evaluation.status]
        st.markdown(f"""
        <div class="{box}">
            <h4>{format_month(month)}</h4>
            <p class="big-number">{_inr(evaluation.spent)} / {_inr(evaluation.budget_amount)}</p>
            <p>{_inr(evaluation.display_amount)} {evaluation.remaining_label}
               ({format_percentage(evaluation.ratio)} used)</p>
        </div>
        """, unsafe_allow_html=True)
        st.progress(float(evaluation.percentage) / 100)

        if st.button("🗑️ Remove Budget"):
            budget_flow.delete_budget(month)
            st.rerun()

    shares = report_flow.category_shares(month)
    if shares:
        st.markdown("### Where the money went")
        for share in shares:
            st.markdown(
                f"- **{share.category.value}**: {_inr(share.amount)} "
                f"({format_percentage(share.percentage)})"
            )

    all_budgets = budget_flow.store.all()
    if all_budgets:
        st.markdown("### All budgets")
        for budget in all_budgets:
            st.markdown(f"- {format_month(budget.month)}: {_inr(budget.amount)}")


def render_reports_page(flow: ReportFlow):
    """Render the monthly report page."""
    st.title("📊 Reports")

    month = st.selectbox("Month", options=flow.months(), format_func=format_month)
    report = flow.monthly_report(month)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Spent", _inr(report.summary.total))
    col2.metric("Transactions", report.summary.count)
    col3.metric("Average", _inr(report.summary.average))
    change = report.comparison.change_percentage
    col4.metric(
        f"vs {format_month(report.comparison.previous_month)}",
        _inr(report.comparison.previous_total),
        delta=None if change is None else format_percentage(change),
        delta_color="inverse",
    )

    if report.is_empty:
        st.info("No expenses recorded for this month.")
        return

    tab_category, tab_daily, tab_people, tab_calendar = st.tabs(
        ["By Category", "Daily", "Who & How", "Calendar"]
    )
    with tab_category:
        col1, col2 = st.columns(2)
        col1.plotly_chart(create_category_pie_chart(report.categories), use_container_width=True)
        col2.plotly_chart(create_category_bar_chart(report.categories), use_container_width=True)
    with tab_daily:
        trend = flow.daily_trend(report)
        st.plotly_chart(create_daily_line_chart(trend), use_container_width=True)
        st.plotly_chart(create_daily_bar_chart(report.daily[::-1]), use_container_width=True)
    with tab_people:
        col1, col2 = st.columns(2)
        col1.plotly_chart(create_group_bar_chart(report.paid_by, "Paid by"), use_container_width=True)
        col2.plotly_chart(
            create_group_bar_chart(report.payment_methods, "Payment method"),
            use_container_width=True,
        )
    with tab_calendar:
        st.plotly_chart(create_heatmap_calendar(flow.heatmap(month)), use_container_width=True)

    st.markdown("### Top expenses")
    for expense in report.top_expenses:
        st.markdown(
            f"- {format_date(expense.date)} · **{_inr(expense.amount)}** · {expense.description}"
        )

    st.markdown("---")
    if st.button("📄 Prepare PDF", type="primary"):
        with st.spinner("Building your report..."):
            exported = flow.export_pdf(month)
        if exported is None:
            st.error("❌ The report could not be generated.")
        else:
            st.download_button(
                "⬇️ Download PDF",
                data=exported.content,
                file_name=exported.filename,
                mime=exported.mime_type,
            )


def render_settings_page(components: AppComponents):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name, key in [("Application", "app"), ("Report layout", "report")]:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Invalid')}")

    app = components.settings.app
    st.markdown("### Storage")
    if app.uses_file_storage:
        st.markdown(f"Saving to `{app.data_dir}`")
    else:
        st.warning("No data directory configured: expenses are kept in memory only.")

    storage = components.audit_logger.storage
    if storage is not None:
        st.markdown("### Recent activity")
        for event in storage.get_recent_events(limit=10):
            st.caption(f"{event.timestamp:%d %b %Y %H:%M} · {event.description}")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
