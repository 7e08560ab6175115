"""
Streamlit web app for the leave calendar.
Main UI with calendar view, month navigation, and sidebar summaries.
"""

import html
import logging
from typing import Dict, List

import streamlit as st

# Import our modules
import db
from controller import CalendarController
from grid import DayCell, grid_weeks
from models import BASE_CATEGORIES, LEAVE_OPTIONS

LOG_LEVEL = db.get_log_level()
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
logger = logging.getLogger(__name__)

WEEKDAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# Page configuration
st.set_page_config(
    page_title="Workforce Calendar",
    page_icon="📅",
    layout="wide",
    initial_sidebar_state="expanded"
)


def get_controller() -> CalendarController:
    """Return this session's controller, creating it on first run."""
    if "controller" not in st.session_state:
        try:
            store = db.LeaveStore.from_config()
        except db.ConfigError as e:
            logger.error("Startup aborted: %s", e)
            st.error(f"{e} Set them in .streamlit/secrets.toml or the environment.")
            st.stop()
        controller = CalendarController(store)
        controller.refresh()
        st.session_state.controller = controller
    return st.session_state.controller


def _fmt(value: float) -> str:
    return f"{value:g}"


def render_status(controller: CalendarController):
    """Show the last action's result once, then forget it."""
    status = controller.status
    if status is None:
        return
    if status.level == "error":
        st.error(status.text)
    else:
        st.success(status.text)
    controller.clear_status()


def render_header(controller: CalendarController):
    """Render month navigation."""
    col1, col2, col3 = st.columns([1, 3, 1])

    with col1:
        if st.button("◀ Prev", key="prev_month", use_container_width=True):
            controller.previous_month()
            st.rerun()

    with col2:
        st.markdown(f"<h2 style='text-align: center'>{controller.cursor.label}</h2>",
                    unsafe_allow_html=True)

    with col3:
        if st.button("Next ▶", key="next_month", use_container_width=True):
            controller.next_month()
            st.rerun()


def render_calendar(controller: CalendarController):
    """Render the calendar grid."""
    cols = st.columns(7)
    for i, weekday in enumerate(WEEKDAY_ABBR):
        with cols[i]:
            st.markdown(f"<div class='weekday-label'>{weekday}</div>", unsafe_allow_html=True)

    for week in grid_weeks(controller.grid()):
        cols = st.columns(7)
        for i, cell in enumerate(week):
            with cols[i]:
                if cell is None:
                    # Empty cell
                    st.markdown("<div class='empty-cell'></div>", unsafe_allow_html=True)
                else:
                    render_day_cell(controller, cell)


def render_day_cell(controller: CalendarController, cell: DayCell):
    """Render a single day with its holiday and leave badges."""
    badges = []
    if cell.holiday is not None:
        name = html.escape(cell.holiday.holiday_name or "Holiday")
        badges.append(f'<div class="holiday-badge">🎊 {name}</div>')
    for record in cell.records:
        badges.append(f'<div class="leave-badge">{html.escape(record.leave_type.value)}</div>')

    selected = controller.selection is not None and controller.selection.date_key == cell.date_key
    cell_class = "day-cell selected" if selected else "day-cell"
    st.markdown(f"""
    <div class="{cell_class}">
        <div class="day-number">{cell.day}</div>
        {''.join(badges)}
    </div>
    """, unsafe_allow_html=True)

    if st.button("＋", key=f"add_{cell.date_key}", help=f"Log leave on {cell.date_key}"):
        controller.select_date(cell.date_key)
        st.rerun()

    for record in cell.records:
        if st.button(f"✖ {record.leave_type.value}", key=f"del_{record.id}", help="Delete record"):
            controller.delete(record.id)
            st.rerun()


def render_log_leave(controller: CalendarController):
    """Panel for the selected date: pick a leave type and save."""
    selection = controller.selection
    if selection is None:
        return

    with st.container(border=True):
        st.subheader("Log Leave")
        st.markdown(f"**Date:** {selection.date_key}")

        options = [t.value for t in LEAVE_OPTIONS]
        chosen = st.radio(
            "Leave type",
            options=options,
            index=options.index(selection.leave_type.value),
            horizontal=True,
            key=f"leave_type_{selection.date_key}",
        )
        if chosen != selection.leave_type.value:
            controller.choose_leave_type(chosen)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Save to Calendar", type="primary", use_container_width=True):
                controller.save()
                st.rerun()
        with col2:
            if st.button("Cancel", use_container_width=True):
                controller.dismiss()
                st.rerun()


def _category_lines(totals: Dict[str, float]) -> List[str]:
    return [f"• {category}: {_fmt(totals[category])}" for category in BASE_CATEGORIES if totals.get(category)]


def render_sidebar(controller: CalendarController):
    """Render the sidebar with monthly and yearly summaries and tools."""
    summary = controller.month_summary()
    yearly = controller.year_summary()

    st.sidebar.header(f"📊 {controller.cursor.label}")

    # Days worked may be negative or fractional
    st.sidebar.metric("Days Worked", _fmt(summary['days_worked']))

    col1, col2 = st.sidebar.columns(2)
    with col1:
        st.metric("Weekdays", summary['weekdays'])
    with col2:
        st.metric("Weekday Holidays", summary['weekday_holidays'])
    st.sidebar.markdown(f"**Leave days:** {_fmt(summary['total_leave_days'])}")

    lines = _category_lines(summary['category_totals'])
    if lines:
        st.sidebar.markdown("**By category:**")
        st.sidebar.markdown("\n".join(lines))

    st.sidebar.markdown("---")
    st.sidebar.header(f"🗓️ {yearly['year']} Totals")
    st.sidebar.markdown(f"**Leave days:** {_fmt(yearly['total_leave_days'])}")
    st.sidebar.markdown(f"**Holidays:** {yearly['holidays']} ({yearly['weekday_holidays']} on weekdays)")
    lines = _category_lines(yearly['category_totals'])
    if lines:
        st.sidebar.markdown("\n".join(lines))

    render_holiday_tools(controller)
    render_export(controller)


def render_holiday_tools(controller: CalendarController):
    st.sidebar.markdown("---")
    st.sidebar.header("🎊 Public Holidays")

    country = st.sidebar.text_input("Country code", value=db.get_secret("HOLIDAY_COUNTRY", "SG"))
    subdivision = st.sidebar.text_input("Subdivision (optional)", value=db.get_secret("HOLIDAY_SUBDIVISION", ""))

    if st.sidebar.button(f"Add {controller.cursor.year} holidays"):
        controller.seed_public_holidays(country.strip().upper(), subdivision.strip() or None)
        st.rerun()


def render_export(controller: CalendarController):
    """Render export controls."""
    st.sidebar.markdown("---")
    st.sidebar.header("📁 Export")
    st.sidebar.download_button(
        label="Download month JSON",
        data=controller.export_month(),
        file_name=f"leave_calendar_{controller.cursor.key}.json",
        mime="application/json"
    )


def main():
    """Main application function."""
    # Inject CSS styles
    st.markdown("""
    <style>
    .weekday-label {
        text-align: center;
        font-weight: bold;
        padding: 10px;
        text-transform: uppercase;
        opacity: 0.75;
    }

    .empty-cell {
        height: 110px;
        background: #f8fafc;
        border-radius: 0.5rem;
        opacity: 0.5;
    }

    .day-cell {
        border: 1px solid #e2e8f0;
        border-radius: 0.5rem;
        padding: 1.5rem 0.4rem 0.4rem;
        min-height: 110px;
        position: relative;
    }

    .day-cell.selected {
        border-color: #2563eb;
        background: #eff6ff;
    }

    .day-number {
        position: absolute;
        top: 0.35rem;
        left: 0.5rem;
        font-weight: 700;
        opacity: 0.6;
        font-size: 14px;
    }

    .holiday-badge, .leave-badge {
        font-size: 10px;
        font-weight: 700;
        padding: 2px 6px;
        border-radius: 4px;
        margin-top: 3px;
        white-space: nowrap;
        overflow: hidden;
        text-overflow: ellipsis;
    }

    .holiday-badge {
        background: #fef9c3;
        color: #a16207;
        border: 1px solid #fde68a;
    }

    .leave-badge {
        background: #dbeafe;
        color: #1d4ed8;
        border: 1px solid #bfdbfe;
    }
    </style>
    """, unsafe_allow_html=True)

    st.title("📅 Workforce Calendar")
    st.caption("Click ＋ on any day to add leave, ✖ to remove it.")

    controller = get_controller()

    render_status(controller)
    render_header(controller)
    render_log_leave(controller)
    render_calendar(controller)
    render_sidebar(controller)


if __name__ == "__main__":
    main()
