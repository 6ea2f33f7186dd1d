"""Streamlit UI for the student performance dashboard.

The page is a thin adapter: widgets call into ``student_dashboard.Dashboard``
from their callbacks, and the script body replays the dashboard's latest
view into Streamlit containers through ``StreamlitRenderer``.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (ROOT, SRC):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from app.sample_data import sample_roster  # noqa: E402
from app.ui import AppShell, download_text, forget_deleted, kpi_row, placeholder, section_header, status_badge, style_fig  # noqa: E402
from student_dashboard.charts import ComparisonChart, RadarChart  # noqa: E402
from student_dashboard.config import load_config  # noqa: E402
from student_dashboard.dashboard import Dashboard  # noqa: E402
from student_dashboard.export import PRINT_SINGLE, csv_content  # noqa: E402
from student_dashboard.io import read_roster  # noqa: E402
from student_dashboard.metrics import grade, performance_class, rank_badge, ranked_frame  # noqa: E402
from student_dashboard.models import SUBJECT_LABELS, SUBJECTS, RankedStudent, ValidationError  # noqa: E402
from student_dashboard.plots import average_bar, figure_from_primitives  # noqa: E402
from student_dashboard.query import CATEGORIES, SORT_KEYS  # noqa: E402
from student_dashboard.selection import PANEL_INSIGHT, InsightPanel, SelectionState  # noqa: E402

st.set_page_config(page_title="Student Performance Dashboard", layout="wide", page_icon="🎓")
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DATA_DIR = ROOT / "data"
CONFIG_PATH = DATA_DIR / "dashboard_config.json"

LABEL_TO_SUBJECT = {label: subject for subject, label in SUBJECT_LABELS.items()}
CATEGORY_LABELS = {"all": "All students", "top": "Top performers (≥75)", "below": "Below 50"}
SORT_LABELS = {"rank": "Rank", "name": "Name", "roll": "Roll No"}
MARK_TONES = {"Excellent": "🟢", "Average": "🟡", "Needs Improvement": "🔴"}


def _flash(kind: str, message: str) -> None:
    st.session_state.setdefault("flash", []).append((kind, message))


def _show_flash() -> None:
    for kind, message in st.session_state.pop("flash", []):
        getattr(st, kind)(message)


def _new_dashboard(roster) -> Dashboard:
    try:
        config = load_config(CONFIG_PATH)
    except ValueError as exc:
        _flash("warning", f"Ignoring dashboard config: {exc}")
        config = None
    return Dashboard(roster, config=config)


def _init_state() -> None:
    defaults = {
        "dashboard": None,
        "editor_version": 0,
        "editor_ids": [],
        "print_view": False,
    }
    for key, val in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = val
    if st.session_state["dashboard"] is None:
        st.session_state["dashboard"] = _new_dashboard(sample_roster())


def _dashboard() -> Dashboard:
    return st.session_state["dashboard"]


# callbacks


def _bump_editor() -> None:
    st.session_state["editor_version"] += 1


def _apply_editor_changes(editor_key: str) -> None:
    dashboard = _dashboard()
    edited: Dict[int, Dict[str, object]] = st.session_state.get(editor_key, {}).get("edited_rows", {})
    ids: List[int] = st.session_state["editor_ids"]

    for row_idx, changes in edited.items():
        position = int(row_idx)
        if position >= len(ids):
            continue
        student_id = ids[position]
        for column, value in changes.items():
            if column == "Select":
                if not dashboard.toggle_selection(student_id, bool(value)):
                    _flash("warning", "You can compare at most two students at a time.")
            elif column in LABEL_TO_SUBJECT:
                if not dashboard.edit_mark(student_id, LABEL_TO_SUBJECT[column], value):
                    _flash("error", "Marks must be whole numbers between 0 and 100.")
    _bump_editor()


def _on_search() -> None:
    dashboard = _dashboard()
    dashboard.request_search(st.session_state["search_term"])
    # text_input only reports committed values
    dashboard.debouncer.flush()


def _on_category() -> None:
    _dashboard().set_category(st.session_state["category"])


def _on_sort() -> None:
    _dashboard().set_sort(st.session_state["sort"])


def _on_focus() -> None:
    student_id = st.session_state.get("focus_id")
    if student_id is not None:
        _dashboard().click_row(int(student_id))


def _on_delete(student_id: int) -> None:
    if _dashboard().delete_student(student_id):
        _flash("success", "Student record deleted.")
    forget_deleted(st.session_state, student_id)
    _bump_editor()


def _toggle_print() -> None:
    st.session_state["print_view"] = not st.session_state["print_view"]


# rendering


def _roster_table(view: List[RankedStudent], selection: SelectionState) -> pd.DataFrame:
    frame = ranked_frame(view)
    frame.insert(0, "Select", [student.id in selection.comparison for student in view])
    frame["Rank"] = [f"{rank_badge(s.rank)} {s.rank}".strip() for s in view]
    frame["Status"] = [MARK_TONES[performance_class(s.average)] for s in view]
    return frame.drop(columns=["id"])


class StreamlitRenderer:
    def __init__(self, table_slot, insight_slot, radar_slot, comparison_slot):
        self.table_slot = table_slot
        self.insight_slot = insight_slot
        self.radar_slot = radar_slot
        self.comparison_slot = comparison_slot

    def render_roster(self, view: List[RankedStudent], selection: SelectionState) -> None:
        st.session_state["editor_ids"] = [student.id for student in view]
        editor_key = f"roster_editor_{st.session_state['editor_version']}"
        with self.table_slot.container():
            if not view:
                placeholder("No students match the current search and filter.")
                return
            subject_columns = {
                SUBJECT_LABELS[subject]: st.column_config.NumberColumn(min_value=0, max_value=100, step=1, format="%d")
                for subject in SUBJECTS
            }
            st.data_editor(
                _roster_table(view, selection),
                key=editor_key,
                hide_index=True,
                use_container_width=True,
                disabled=["Rank", "Roll No", "Name", "Average", "Grade", "Status"],
                column_config={"Select": st.column_config.CheckboxColumn("Compare"), **subject_columns},
                on_change=_apply_editor_changes,
                args=(editor_key,),
            )

    def render_insight(self, panel: InsightPanel) -> None:
        with self.insight_slot.container():
            section_header("Performance insight")
            if panel.kind != PANEL_INSIGHT:
                placeholder(panel.placeholder)
                return
            insight = panel.insight
            st.markdown(f"**{panel.student.name}**")
            status_badge(insight.status)
            left, right = st.columns(2)
            left.metric("Average", f"{insight.average}%")
            right.metric("Grade", panel.grade)
            st.write(f"**Strengths:** {', '.join(insight.strengths) or 'None'}")
            st.write(f"**Needs work:** {', '.join(insight.weaknesses) or 'None'}")

    def draw_radar(self, chart: RadarChart) -> None:
        self._draw_radar(chart)

    def draw_empty_radar(self, chart: RadarChart) -> None:
        self._draw_radar(chart)

    def _draw_radar(self, chart: RadarChart) -> None:
        with self.radar_slot.container():
            section_header(chart.title)
            fig = figure_from_primitives(chart.primitives, chart.width, chart.height)
            st.plotly_chart(style_fig(fig, title=" "), use_container_width=False)

    def draw_comparison(self, chart: ComparisonChart) -> None:
        with self.comparison_slot.container():
            section_header(f"{chart.names[0]} vs {chart.names[1]}", "Blue bars: first selected, orange bars: second selected.")
            fig = figure_from_primitives(chart.primitives, chart.width, chart.height)
            st.plotly_chart(style_fig(fig, title=" "), use_container_width=False)
            for winner in chart.winners:
                st.markdown(f"★ **{winner.label}:** {winner.name}")
            if not chart.winners:
                placeholder("Every subject is tied.")
            st.button("Close comparison", on_click=_dashboard().close_comparison)

    def close_comparison(self) -> None:
        self.comparison_slot.empty()


def _sidebar(dashboard: Dashboard) -> None:
    st.sidebar.subheader("Roster source")
    uploaded = st.sidebar.file_uploader("Upload a roster CSV", type=["csv"])
    if uploaded is not None and st.sidebar.button("Load uploaded roster"):
        try:
            st.session_state["dashboard"] = _new_dashboard(read_roster(uploaded))
            _bump_editor()
            _flash("success", f"Loaded {uploaded.name}.")
        except (ValidationError, ValueError) as exc:
            logger.warning("Roster upload %s rejected: %s", uploaded.name, exc)
            _flash("error", str(exc))
        st.rerun()
    if st.sidebar.button("Reset to sample data"):
        st.session_state["dashboard"] = _new_dashboard(sample_roster())
        _bump_editor()
        st.rerun()

    st.sidebar.subheader("Add student")
    with st.sidebar.form("add_student_form", clear_on_submit=True):
        name = st.text_input("Student name")
        roll_no = st.text_input("Roll number")
        marks = {subject: st.number_input(SUBJECT_LABELS[subject], min_value=0, max_value=100, step=1, value=0) for subject in SUBJECTS}
        submitted = st.form_submit_button("Add student")
    if submitted:
        try:
            student = dashboard.add_student(name, roll_no, marks)
            _flash("success", f"Added {student.name}.")
            _bump_editor()
        except ValidationError as exc:
            _flash("error", str(exc))
        st.rerun()

    st.sidebar.subheader("Delete student")
    if dashboard.roster:
        names = {student.id: f"{student.roll_no} · {student.name}" for student in dashboard.roster}
        target = st.sidebar.selectbox("Student", options=list(names), format_func=names.get, key="delete_id")
        confirm = st.sidebar.checkbox("Yes, delete this student record", key="delete_confirm")
        st.sidebar.button("Delete", disabled=not confirm, on_click=_on_delete, args=(target,))


def _controls(dashboard: Dashboard) -> None:
    search_col, filter_col, sort_col, focus_col = st.columns([2, 1, 1, 2])
    with search_col:
        st.text_input("Search by name or roll number", key="search_term", on_change=_on_search)
    with filter_col:
        st.selectbox("Filter", options=CATEGORIES, format_func=CATEGORY_LABELS.get, key="category", on_change=_on_category)
    with sort_col:
        st.selectbox("Sort by", options=SORT_KEYS, format_func=SORT_LABELS.get, key="sort", on_change=_on_sort)
    with focus_col:
        names = {student.id: student.name for student in dashboard.roster}
        st.selectbox(
            "Focus student (radar)",
            options=list(names),
            index=None,
            format_func=names.get,
            key="focus_id",
            placeholder="Pick a student row",
            on_change=_on_focus,
        )


def _actions(dashboard: Dashboard) -> None:
    count = len(dashboard.selection.comparison)
    compare_col, export_col, print_col = st.columns(3)
    with compare_col:
        st.button(f"Compare Selected ({count}/2)", disabled=count != 2, on_click=dashboard.open_comparison)
    with export_col:
        download_text("Export CSV", csv_content(dashboard.roster), dashboard.config.export_filename)
    with print_col:
        st.button("Exit print view" if st.session_state["print_view"] else "Print view", on_click=_toggle_print)


def _print_view(dashboard: Dashboard) -> None:
    report = dashboard.print_report()
    st.header(report.title)
    st.dataframe(ranked_frame(report.students).drop(columns=["id"]), hide_index=True, use_container_width=True)
    if report.mode == PRINT_SINGLE and report.chart is not None:
        fig = figure_from_primitives(report.chart.primitives, report.chart.width, report.chart.height)
        st.plotly_chart(style_fig(fig, title=" "), use_container_width=False)
    st.caption("Use your browser's print command (Ctrl/Cmd + P) to print this view.")


def main():
    _init_state()
    shell = AppShell("Student Performance Dashboard", "Edit marks inline; ranks, grades, insights and charts update live.")
    shell.header()
    _show_flash()

    dashboard = _dashboard()
    _sidebar(dashboard)

    if st.session_state["print_view"]:
        st.button("Exit print view", on_click=_toggle_print)
        _print_view(dashboard)
        return

    view = dashboard.view
    summary = view.summary
    kpi_row(
        [
            {"label": "Students", "value": summary["students"]},
            {
                "label": "Class average",
                "value": summary["class_average"] if summary["students"] else "-",
                "hint": grade(summary["class_average"]) if summary["students"] else "",
            },
            {"label": "Top performers", "value": summary["top_performers"], "hint": "average ≥ 75"},
            {"label": "Below 50", "value": summary["below_pass"]},
        ]
    )

    _controls(dashboard)
    _actions(dashboard)

    comparison_slot = st.empty()
    table_col, side_col = st.columns([3, 1])
    with table_col:
        table_slot = st.empty()
    with side_col:
        insight_slot = st.empty()
        radar_slot = st.empty()

    dashboard.render(StreamlitRenderer(table_slot, insight_slot, radar_slot, comparison_slot))

    with st.expander("Class overview"):
        st.plotly_chart(style_fig(average_bar(ranked_frame(view.ranked))), use_container_width=True)


if __name__ == "__main__":
    main()
