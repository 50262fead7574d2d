# -----------------------------------------------
# ⏱️ Timey: weekly timesheets (Streamlit)
# -----------------------------------------------
# Requires: streamlit, sqlmodel, pandas, reportlab, openpyxl
# Each browser session gets its own in-memory store seeded with the demo data.

from __future__ import annotations

import streamlit as st

from config import Settings, configure_logging
from domain import InvalidEntryError, Role, SessionContext
from fixtures import DEMO_USERS, PEOPLE_BY_ID, PROJECTS, employees, initial_tasks
from reports import EXPORT_FORMATS, MIME_TYPES, NothingToExportError, export, export_filename
from repository import TaskRepository
from services import (
    DATE_RANGE_PRESETS,
    TaskFilter,
    TimesheetService,
    resolve_date_range,
    summarize,
    today_in,
)
from utils import (
    day_label,
    entries_to_dataframe,
    format_hours,
    grid_to_dataframe,
    hours_by_day,
    hours_by_project,
    week_label,
)

# =========================
# Configuration + logging
# =========================
SETTINGS = Settings.from_env()
logger = configure_logging(SETTINGS.log_level, SETTINGS.log_file)
APP_TITLE = "Timey"
RANGE_LABELS = {
    "today": "Today",
    "this_week": "This week",
    "this_month": "This month",
    "custom": "Custom range",
}

st.set_page_config(page_title=APP_TITLE, page_icon="⏱️", layout="wide")


def today():
    return today_in(SETTINGS.timezone)


# =========================
# Session state helpers
# =========================
def get_service() -> TimesheetService:
    """One store per browser session, created on first use."""
    if "service" not in st.session_state:
        repo = TaskRepository(SETTINGS.database_url)
        if SETTINGS.seed_fixtures:
            repo.seed(initial_tasks())
        st.session_state["service"] = TimesheetService(repo, today=today)
    return st.session_state["service"]


def current_context() -> SessionContext | None:
    return st.session_state.get("ctx")


def _flash_success_if_any():
    msg = st.session_state.pop("_flash_success", None)
    if msg:
        st.success(msg)


def login_screen():
    st.title(f"⏱️ {APP_TITLE}")
    st.caption("Pick who you are. There is no password: this is a demo workspace.")
    names = {u.name: u for u in DEMO_USERS}
    choice = st.selectbox("User", list(names), index=1)
    if st.button("Continue", use_container_width=True):
        u = names[choice]
        st.session_state["ctx"] = SessionContext(user_id=u.id, name=u.name, role=u.role)
        st.session_state["week_offset"] = 0
        logger.info("Session started for %s (%s)", u.name, u.role.value)
        st.rerun()


def logout():
    st.session_state.pop("ctx", None)
    st.rerun()


# =========================
# Week navigation
# =========================
def week_navigation(service: TimesheetService):
    offset = st.session_state.setdefault("week_offset", 0)
    window = service.window(offset, anchor=SETTINGS.anchor)
    c1, c2, c3, c4 = st.columns([1, 1, 1, 5])
    if c1.button("◀", key="prev_week"):
        st.session_state["week_offset"] = offset - 1
        st.rerun()
    if c2.button("Today", key="this_week"):
        st.session_state["week_offset"] = 0
        st.rerun()
    if c3.button("▶", key="next_week"):
        st.session_state["week_offset"] = offset + 1
        st.rerun()
    c4.markdown(f"**🗓️ {week_label(window.start_date, window.end_date)}**")
    return window


# =========================
# Grid + cell edit
# =========================
def render_grid(result):
    if result.is_empty:
        st.info("No tasks found for this week.")
        return
    df = grid_to_dataframe(result)
    st.dataframe(df.style.format("{:.2f}"), use_container_width=True)


def edit_cell_form(service: TimesheetService, ctx: SessionContext, result):
    if result.is_empty:
        return
    st.subheader("✏️ Edit hours")
    tasks = {f"{r.name} · {r.project_name}": r for r in result.rows}
    days = list(result.window.day_isos)
    c1, c2 = st.columns(2)
    label = c1.selectbox("Task", list(tasks))
    day = c2.selectbox("Day", days, format_func=day_label)
    row = tasks[label]
    cell = row.cells.get(day)
    current = cell.hours if cell else 0.0
    existing_desc = next((e.description for e in cell.entries if e.description), "") if cell else ""
    with st.form(f"edit_cell_{row.task_id}_{day}"):
        hours_raw = st.text_input("Hours", value=f"{current:g}")
        desc = st.text_area("Description", value=existing_desc or "")
        if cell and len(cell.entries) > 1:
            st.caption(f"This cell sums {len(cell.entries)} entries; the new total is shared in proportion.")
        submitted = st.form_submit_button("Save", use_container_width=True)
    if submitted:
        updated = service.edit_cell(ctx, row.task_id, day, hours_raw, desc)
        if updated:
            total = sum(e.worked_hours for e in updated)
            st.session_state["_flash_success"] = f"Saved {row.name} on {day_label(day)}: {format_hours(total)}"
        else:
            st.session_state["_flash_success"] = "Nothing logged on that day; edit ignored."
        st.rerun()


def log_hours_form(service: TimesheetService, ctx: SessionContext):
    with st.expander("➕ Log hours on a new task"):
        with st.form("log_hours"):
            project = st.selectbox("Project", PROJECTS, format_func=lambda p: p.name)
            name = st.text_input("Task name")
            work_date = st.date_input("Date", value=today())
            hours = st.number_input("Hours", min_value=0.0, step=0.25, value=1.0)
            desc = st.text_input("Description (optional)")
            ok = st.form_submit_button("Log", use_container_width=True)
        if ok:
            if not name.strip():
                st.warning("Give the task a name.")
                return
            next_id = max((e.task_id for e in service.repository.list_all()), default=0) + 1
            try:
                service.log_hours(
                    ctx, next_id, work_date, hours,
                    name=name.strip(), project_id=project.id, project_name=project.name, description=desc,
                )
            except InvalidEntryError as e:
                st.error(str(e))
                return
            st.session_state["_flash_success"] = f"Logged {format_hours(hours)} on {name.strip()}"
            st.rerun()


# =========================
# Admin: filters, stats, export
# =========================
def admin_filters(window):
    st.subheader("🔎 Filters")
    c1, c2, c3, c4 = st.columns(4)
    project = c1.selectbox("Project", [None] + PROJECTS, format_func=lambda p: "All projects" if p is None else p.name)
    employee = c2.selectbox("Employee", [None] + employees(), format_func=lambda u: "All employees" if u is None else u.name)
    exact = c3.date_input("Exact date", value=None)
    preset = c4.selectbox("Date range", DATE_RANGE_PRESETS, index=1, format_func=RANGE_LABELS.get)
    custom_start = custom_end = None
    if preset == "custom":
        c5, c6 = st.columns(2)
        s = c5.date_input("From", value=window.start_date)
        e = c6.date_input("To", value=window.end_date)
        custom_start, custom_end = s.isoformat(), e.isoformat()
    task_filter = TaskFilter(
        project_id=project.id if project else None,
        employee_id=employee.id if employee else None,
        exact_date=exact.isoformat() if exact else None,
    )
    start, end = resolve_date_range(preset, today(), window, custom_start, custom_end)
    return task_filter, start, end


def stats_cards(entries):
    s = summarize(entries, today())
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Today", format_hours(s.today_hours))
    c2.metric("Selected range", format_hours(s.range_hours))
    c3.metric("Billable", format_hours(s.billable_hours))
    c4.metric("Non-billable", format_hours(s.non_billable_hours))
    return s


def export_section(entries, start, end, summary):
    st.subheader("⬇️ Export")
    fmt = st.selectbox("Format", EXPORT_FORMATS, format_func=str.upper)
    df = entries_to_dataframe(entries, PEOPLE_BY_ID)
    st.caption(f"{len(df)} rows will be exported based on current filters and date range.")
    try:
        data = export(
            df, fmt,
            title=f"{APP_TITLE} - timesheet {start} to {end}",
            summary_line=f"Total: {format_hours(summary.range_hours)} · Billable: {format_hours(summary.billable_hours)}",
        )
    except NothingToExportError as e:
        st.warning(str(e))
        return
    st.download_button(
        f"Export filtered data ({fmt.upper()})",
        data=data,
        file_name=export_filename(fmt, start, end),
        mime=MIME_TYPES[fmt],
        use_container_width=True,
    )


def dashboard(result, entries):
    st.subheader("📊 Dashboard")
    c1, c2 = st.columns(2)
    c1.caption("Hours per day (week)")
    c1.bar_chart(hours_by_day(result))
    c2.caption("Hours per project (range)")
    series = hours_by_project(entries)
    if series.empty:
        c2.info("No hours in range.")
    else:
        c2.bar_chart(series)


# =========================
# Pages
# =========================
def admin_page(service: TimesheetService, ctx: SessionContext):
    st.caption("Time entries with flexible filters and export options.")
    window = week_navigation(service)
    task_filter, start, end = admin_filters(window)
    range_entries = service.range_entries(ctx, start, end, task_filter)
    summary = stats_cards(range_entries)
    result = service.grid(ctx, window, task_filter, start, end)
    st.subheader("🗓️ Week")
    render_grid(result)
    edit_cell_form(service, ctx, result)
    dashboard(result, range_entries)
    export_section(range_entries, start, end, summary)


def employee_page(service: TimesheetService, ctx: SessionContext):
    st.caption(f"Weekly hours for {ctx.name}.")
    window = week_navigation(service)
    result = service.grid(ctx, window)
    c1, c2 = st.columns(2)
    c1.metric("This week", format_hours(result.grand_total))
    c2.metric("Tasks", len(result.rows))
    render_grid(result)
    edit_cell_form(service, ctx, result)
    log_hours_form(service, ctx)


def main():
    ctx = current_context()
    if ctx is None:
        login_screen()
        return
    service = get_service()
    head, out = st.columns([6, 1])
    title = "Admin timesheet" if ctx.role == Role.ADMIN else "My timesheet"
    head.title(f"⏱️ {title}")
    if out.button("Log out"):
        logout()
    _flash_success_if_any()
    if ctx.is_admin:
        admin_page(service, ctx)
    else:
        employee_page(service, ctx)


main()
