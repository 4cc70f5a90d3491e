"""
Streamlit Frontend for Financial Records

The interface for recording income and expenses and asking simple
questions about them.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every error the service reports is shown as-is
3. Destructive actions (delete, rename) need an explicit click
4. No hidden actions

Run with: streamlit run app/main.py
"""

from datetime import date, datetime, time

import streamlit as st

from finrecords.config import validate_all_settings
from finrecords.models.record import (
    FinancialRecord,
    OperationResult,
    datetime_to_timestamp,
    timestamp_to_datetime,
)
from finrecords.orchestrator import RecordService, create_app_components


# Page configuration
st.set_page_config(
    page_title="Financial Records",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_service() -> RecordService:
    """Get or create the shared service (cached across sessions)."""
    return create_app_components()


def show_error(result: OperationResult) -> None:
    """Render a failed result: not-found as info, everything else as error."""
    if result.error_kind == "not_found":
        st.info(f"📋 {result.error_message}")
    elif result.error_kind == "validation":
        st.error(f"❌ {result.error_message}")
    else:
        st.error(f"⚠️ Internal error: {result.error_message}")


def records_table(records: list[FinancialRecord]) -> list[dict]:
    """Rows for st.dataframe."""
    rows = []
    for record in records:
        rows.append({
            "ID": record.id,
            "Amount": record.amount,
            "Type": "Income" if record.is_income else "Expense",
            "Category": record.category,
            "Notes": record.notes if record.notes is not None else "—",
            "Created": record.created_datetime.strftime("%d %b %Y %H:%M"),
            "Updated": (
                timestamp_to_datetime(record.updated_at).strftime("%d %b %Y %H:%M")
                if record.updated_at is not None else "—"
            ),
        })
    return rows


def day_bounds(start: date, end: date) -> tuple[int, int]:
    """Inclusive nanosecond bounds covering whole UTC days."""
    start_ts = datetime_to_timestamp(datetime.combine(start, time.min))
    end_ts = datetime_to_timestamp(datetime.combine(end, time.max))
    return start_ts, end_ts


def main():
    """Main application entry point."""
    service = get_service()

    st.sidebar.title("💰 Financial Records")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Record", "📊 Browse", "✏️ Edit", "📈 Analytics", "📤 Export", "📜 Audit", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        f"""
        **Records stored:** {service.record_count}

        Positive amounts are income,
        negative amounts are expenses.
        """
    )

    if page == "➕ Add Record":
        render_add_page(service)
    elif page == "📊 Browse":
        render_browse_page(service)
    elif page == "✏️ Edit":
        render_edit_page(service)
    elif page == "📈 Analytics":
        render_analytics_page(service)
    elif page == "📤 Export":
        render_export_page(service)
    elif page == "📜 Audit":
        render_audit_page(service)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_add_page(service: RecordService):
    """Render the add-record form."""
    st.title("➕ Add Record")

    with st.form("add_record", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            kind = st.radio("Type", ["Expense", "Income"], horizontal=True)
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
        with col2:
            category = st.text_input("Category *", placeholder="e.g. food, salary")
            has_notes = st.checkbox("Attach a note")
        notes = st.text_area("Notes", placeholder="Optional note...")

        submitted = st.form_submit_button("✅ Save", type="primary")

    if submitted:
        signed = -amount if kind == "Expense" else amount
        result = service.create({
            "amount": signed,
            "category": category,
            "notes": notes if has_notes else None,
        })
        if result.success:
            st.success(f"✅ Saved {result.value.category} {result.value.amount:+,.2f}")
        else:
            show_error(result)


def render_browse_page(service: RecordService):
    """Render record listing with filters."""
    st.title("📊 Browse Records")

    view = st.selectbox(
        "Show",
        [
            "All records",
            "By category",
            "By date range",
            "Expenses greater than",
            "Incomes less than",
            "With notes",
            "Without notes",
        ],
    )

    result = None
    if view == "All records":
        result = service.list_all()
    elif view == "By category":
        categories = service.categories()
        if not categories.success:
            show_error(categories)
            return
        category = st.selectbox("Category", categories.value)
        result = service.by_category(category)
    elif view == "By date range":
        col1, col2 = st.columns(2)
        with col1:
            start = st.date_input("From", value=date.today().replace(day=1))
        with col2:
            end = st.date_input("To", value=date.today())
        start_ts, end_ts = day_bounds(start, end)
        result = service.by_date_range(start_ts, end_ts)
    elif view == "Expenses greater than":
        threshold = st.number_input("Threshold", min_value=0.0, value=100.0, step=10.0)
        result = service.expenses_greater_than(threshold)
    elif view == "Incomes less than":
        threshold = st.number_input("Threshold", min_value=0.0, value=1000.0, step=10.0)
        result = service.incomes_less_than(threshold)
    elif view == "With notes":
        result = service.with_notes()
    elif view == "Without notes":
        result = service.without_notes()

    st.markdown("---")

    if result.success:
        st.caption(f"{result.result_count} records")
        st.dataframe(records_table(result.value), use_container_width=True)
    else:
        show_error(result)


def render_edit_page(service: RecordService):
    """Render update, delete and category rename."""
    st.title("✏️ Edit Records")

    tab_update, tab_delete, tab_rename = st.tabs(["Update", "Delete", "Rename category"])

    with tab_update:
        record_id = st.text_input("Record ID", key="update_id")
        if record_id:
            found = service.get_by_id(record_id)
            if not found.success:
                show_error(found)
            else:
                record = found.value
                with st.form("update_record"):
                    amount = st.number_input(
                        "Amount (negative = expense) *",
                        value=record.amount,
                        step=0.01,
                        format="%.2f",
                    )
                    category = st.text_input("Category *", value=record.category)
                    has_notes = st.checkbox("Has a note", value=record.has_notes)
                    notes = st.text_area("Notes", value=record.notes or "")
                    submitted = st.form_submit_button("💾 Update", type="primary")

                if submitted:
                    result = service.update(record_id, {
                        "amount": amount,
                        "category": category,
                        "notes": notes if has_notes else None,
                    })
                    if result.success:
                        st.success("✅ Record updated")
                    else:
                        show_error(result)

    with tab_delete:
        record_id = st.text_input("Record ID", key="delete_id")
        if st.button("🗑️ Delete", type="primary"):
            result = service.delete(record_id)
            if result.success:
                st.success(f"✅ Deleted {result.value.category} {result.value.amount:+,.2f}")
            else:
                show_error(result)

    with tab_rename:
        old_category = st.text_input("Current category")
        new_category = st.text_input("New category")
        if st.button("🔁 Rename", type="primary"):
            result = service.rename_category(old_category, new_category)
            if result.success:
                st.success(f"✅ Renamed {result.result_count} records")
            else:
                show_error(result)


def render_analytics_page(service: RecordService):
    """Render summary, averages and forecast."""
    st.title("📈 Analytics")

    summary = service.summary()
    if summary.success:
        col1, col2, col3 = st.columns(3)
        col1.metric("Total income", f"{summary.value.total_income:,.2f}")
        col2.metric("Total expense", f"{summary.value.total_expense:,.2f}")
        col3.metric("Net flow", f"{summary.value.net_flow:,.2f}")
    else:
        show_error(summary)

    st.markdown("### Monthly averages")
    col1, col2 = st.columns(2)
    with col1:
        expenses = service.average_monthly_expenses()
        if expenses.success:
            st.metric("Average monthly expenses", f"{expenses.value:,.2f}")
        else:
            show_error(expenses)
    with col2:
        income = service.average_monthly_income()
        if income.success:
            st.metric("Average monthly income", f"{income.value:,.2f}")
        else:
            show_error(income)

    st.markdown("### Forecast")
    months_ahead = st.number_input("Months ahead", min_value=1, value=3, step=1)
    forecast = service.forecast_future_expenses(months_ahead)
    if forecast.success:
        st.metric(f"Expected expenses over {months_ahead} months", f"{forecast.value:,.2f}")
        st.caption("Naive estimate: average expense per record × months ahead.")
    else:
        show_error(forecast)


def render_export_page(service: RecordService):
    """Render JSON export."""
    st.title("📤 Export")

    result = service.export("json")
    if not result.success:
        show_error(result)
        return

    st.download_button(
        "⬇️ Download JSON",
        data=result.value,
        file_name="financial_records.json",
        mime="application/json",
    )
    with st.expander("Preview"):
        st.code(result.value, language="json")


def render_audit_page(service: RecordService):
    """Render the recent audit trail."""
    st.title("📜 Audit Trail")

    events = service.recent_audit_events(limit=200)
    if not events:
        st.info("No audit events yet.")
        return

    st.dataframe(
        [
            dict(zip(
                ["Time", "Event", "Severity", "Entity", "Description", "Details", "Error"],
                event.to_row(),
            ))
            for event in events
        ],
        use_container_width=True,
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Application", "app"),
        ("Export", "export"),
        ("Audit trail", "audit"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Invalid")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown(
        "Configuration is read from environment variables and an optional `.env` file "
        "(`FINRECORDS_EXPORT_*`, `FINRECORDS_AUDIT_*`, `LOG_LEVEL`, ...)."
    )


if __name__ == "__main__":
    main()
