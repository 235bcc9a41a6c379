"""
Streamlit Frontend for the Financial Agent

A chat page and a dashboard page, both talking to the transport
handlers in finagent.api only. The frontend holds no ledger state of
its own: every render re-reads the dashboard payload.
"""

import asyncio

import streamlit as st

from finagent.api import FinancialAgentAPI, create_api
from finagent.config import validate_all_settings
from finagent.queries import format_currency


st.set_page_config(
    page_title="Financial Agent",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_api() -> FinancialAgentAPI:
    """Get or create the API (cached for the process)."""
    return create_api()


def main():
    """Main application entry point."""
    api = get_api()

    st.sidebar.title("💰 Financial Agent")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["💬 Chat", "📊 Dashboard", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Try saying:**
        - "I spent $50 on groceries"
        - "Add rent bill of $1200 due 2024-01-01"
        - "Save $5000 for vacation by 2024-12-31"
        - "Show me my financial summary"
        """
    )

    if page == "💬 Chat":
        render_chat_page(api)
    elif page == "📊 Dashboard":
        render_dashboard_page(api)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_chat_page(api: FinancialAgentAPI):
    """Render the chat page."""
    st.title("💬 Chat")

    if "history" not in st.session_state:
        st.session_state.history = []

    for role, text in st.session_state.history:
        with st.chat_message(role):
            st.markdown(text)

    prompt = st.chat_input("Tell me about an expense, bill or savings goal")
    if not prompt:
        return

    st.session_state.history.append(("user", prompt))
    with st.chat_message("user"):
        st.markdown(prompt)

    with st.spinner("Thinking..."):
        status, payload = run_async(api.handle_chat({"message": prompt}))

    with st.chat_message("assistant"):
        if status == 200:
            st.markdown(payload["message"])
            if "data" in payload:
                with st.expander("Details"):
                    st.json(payload["data"])
        else:
            st.error(payload["message"])

    st.session_state.history.append(("assistant", payload["message"]))


def render_dashboard_page(api: FinancialAgentAPI):
    """Render the financial dashboard."""
    st.title("📊 Dashboard")

    status, data = run_async(api.handle_financial_data())
    if status != 200:
        st.error(data.get("error", "Failed to load financial data"))

    summary = data["summary"]
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Last 30 days", format_currency(summary["monthlyExpenses"]))
    col2.metric("Upcoming bills", format_currency(summary["upcomingBills"]))
    col3.metric("Total saved", format_currency(summary["totalSaved"]))
    col4.metric("Net worth", format_currency(summary["netWorth"]))

    st.markdown("---")

    st.subheader("Recent expenses")
    if data["expenses"]:
        st.dataframe(data["expenses"], use_container_width=True)
    else:
        st.info("No expenses yet. Tell the chat what you spent.")

    st.subheader("Bills")
    if data["bills"]:
        for bill in data["bills"]:
            days = bill["days_until_due"]
            when = f"due in {days} days" if days >= 0 else f"overdue by {-days} days"
            st.markdown(
                f"**{bill['name']}** {format_currency(bill['amount'])} "
                f"({bill['due_date']}, {when})"
            )
    else:
        st.info("No bills yet.")

    st.subheader("Savings goals")
    if data["savingsGoals"]:
        for goal in data["savingsGoals"]:
            st.markdown(
                f"**{goal['name']}** {format_currency(goal['current_amount'])}"
                f" of {format_currency(goal['target_amount'])}"
                f" by {goal['target_date']}"
                f" ({format_currency(goal['monthly_contribution'])}/month)"
            )
    else:
        st.info("No savings goals yet.")


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (primary resolver)", "gemini"),
        ("Ledger", "ledger"),
        ("Google Sheets (storage)", "google_sheets"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown(
        "Configuration is read from the environment or a `.env` file. "
        "Without `GEMINI_API_KEY` every message is handled by the keyword fallback."
    )


if __name__ == "__main__":
    main()
