import pytest

from student_dashboard.charts import Rect
from student_dashboard.config import DashboardConfig
from student_dashboard.dashboard import Dashboard, parse_mark
from student_dashboard.models import SUBJECTS, NotFoundError, ValidationError
from student_dashboard.selection import PANEL_EMPTY, PANEL_INSIGHT, PANEL_MULTIPLE

NEW_MARKS = {"math": 70, "science": 71, "english": 72, "history": 73, "computer": 74}


def test_initial_cascade_renders_everything(dashboard, renderer):
    assert renderer.names() == ["render_roster", "render_insight", "draw_empty_radar"]
    assert [s.rank for s in renderer.last("render_roster")] == [1, 2, 3, 4, 5]
    assert renderer.last("render_insight").kind == PANEL_EMPTY


def test_dashboard_copies_the_roster(roster):
    dashboard = Dashboard(roster)
    dashboard.edit_mark(104, "math", "10")
    assert roster[0].marks["math"] == 95


def test_add_student_assigns_next_id(dashboard):
    student = dashboard.add_student("  Kavya Iyer ", "106", NEW_MARKS)
    assert student.id == 106
    assert student.name == "Kavya Iyer"
    assert len(dashboard.roster) == 6
    assert dashboard.view.ranked[2].name == "Kavya Iyer"
    assert dashboard.view.ranked[2].average == 72.0


def test_add_student_to_empty_roster_starts_at_one():
    dashboard = Dashboard([])
    assert dashboard.add_student("First", "1", NEW_MARKS).id == 1


def test_add_duplicate_roll_number_fails(dashboard, renderer):
    calls_before = len(renderer.calls)
    with pytest.raises(ValidationError):
        dashboard.add_student("Someone", "104", NEW_MARKS)
    assert len(dashboard.roster) == 5
    assert len(renderer.calls) == calls_before


def test_add_roll_number_match_is_case_sensitive(dashboard):
    dashboard.add_student("Alpha", "A1", NEW_MARKS)
    dashboard.add_student("Beta", "a1", NEW_MARKS)
    assert len(dashboard.roster) == 7


@pytest.mark.parametrize(
    "marks",
    [
        {**NEW_MARKS, "math": 101},
        {**NEW_MARKS, "science": "abc"},
        {k: v for k, v in NEW_MARKS.items() if k != "history"},
    ],
)
def test_add_student_rejects_bad_marks(dashboard, marks):
    with pytest.raises(ValidationError):
        dashboard.add_student("Someone", "200", marks)
    assert len(dashboard.roster) == 5


def test_add_student_requires_name_and_roll(dashboard):
    with pytest.raises(ValidationError):
        dashboard.add_student("  ", "200", NEW_MARKS)
    with pytest.raises(ValidationError):
        dashboard.add_student("Name", "", NEW_MARKS)


def test_delete_missing_student_is_noop(dashboard):
    assert dashboard.delete_student(999) is False
    assert len(dashboard.roster) == 5


def test_delete_compared_student_closes_comparison(dashboard, renderer):
    dashboard.toggle_selection(101, True)
    dashboard.toggle_selection(102, True)
    assert dashboard.open_comparison()
    assert renderer.last("draw_comparison").names == ("Aarav Sharma", "Priya Patel")

    assert dashboard.delete_student(102)
    assert dashboard.selection.comparison == [101]
    assert dashboard.selection.comparison_open is False
    assert dashboard.view.comparison is None
    assert "close_comparison" in renderer.names()


def test_delete_focused_student_resets_radar_and_insight(dashboard, renderer):
    dashboard.click_row(103)
    assert renderer.calls[-1][0] == "draw_radar"
    assert dashboard.view.radar_empty is False

    dashboard.delete_student(103)
    assert dashboard.selection.focused is None
    assert dashboard.view.radar_empty is True
    assert renderer.calls[-1][0] == "draw_empty_radar"
    assert renderer.last("render_insight").kind == PANEL_EMPTY


def test_edit_mark_recomputes_rank(dashboard):
    assert dashboard.edit_mark(105, "math", "100")
    ranked = dashboard.view.ranked
    vikram = next(s for s in ranked if s.id == 105)
    assert vikram.average == 59.0
    assert vikram.rank == 4


def test_edit_mark_rejects_invalid_values(dashboard, renderer):
    for raw in ["abc", "101", "-1", "", "7.5"]:
        assert dashboard.edit_mark(104, "math", raw) is False
    assert dashboard.get_student(104).marks["math"] == 95
    # the rejected edit re-renders the committed value
    assert renderer.last("render_roster")[0].marks["math"] == 95


def test_edit_mark_on_stale_id_is_silent(dashboard):
    assert dashboard.edit_mark(999, "math", "50") is False


def test_edit_mark_unknown_subject(dashboard):
    with pytest.raises(ValidationError):
        dashboard.edit_mark(104, "art", "50")


def test_get_student_raises_not_found(dashboard):
    with pytest.raises(NotFoundError):
        dashboard.get_student(999)


def test_mark_edit_commit_and_cancel(dashboard):
    edit = dashboard.begin_edit(101, "english")
    edit.type("99")
    assert edit.cancel() == 76
    assert dashboard.get_student(101).marks["english"] == 76

    edit.type("99")
    assert edit.commit() is True
    assert dashboard.get_student(101).marks["english"] == 99
    assert edit.committed == 99

    assert edit.commit("250") is False
    assert edit.text == "99"


def test_begin_edit_on_stale_id(dashboard):
    assert dashboard.begin_edit(999, "math") is None


def test_third_selection_rejected_through_dashboard(dashboard, renderer):
    assert dashboard.toggle_selection(101, True)
    assert dashboard.toggle_selection(102, True)
    assert dashboard.toggle_selection(103, True) is False
    assert dashboard.selection.comparison == [101, 102]
    assert renderer.last("render_insight").kind == PANEL_MULTIPLE


def test_selection_of_unknown_student_ignored(dashboard):
    assert dashboard.toggle_selection(999, True) is False
    assert dashboard.selection.comparison == []


def test_checkbox_preempts_row_focus(dashboard, renderer):
    dashboard.click_row(104)
    assert renderer.last("render_insight").student.id == 104
    dashboard.toggle_selection(105, True)
    assert renderer.last("render_insight").student.id == 105
    dashboard.toggle_selection(105, False)
    panel = renderer.last("render_insight")
    assert panel.kind == PANEL_INSIGHT
    assert panel.student.id == 104


def test_comparison_requires_two(dashboard):
    dashboard.toggle_selection(101, True)
    assert dashboard.open_comparison() is False
    assert dashboard.view.comparison is None


def test_close_comparison(dashboard, renderer):
    dashboard.toggle_selection(101, True)
    dashboard.toggle_selection(104, True)
    dashboard.open_comparison()
    dashboard.close_comparison()
    assert dashboard.view.comparison is None
    assert renderer.calls[-1][0] != "draw_comparison"
    assert "close_comparison" in renderer.names()


def test_query_criteria_drive_view_not_ranks(dashboard):
    dashboard.set_sort("name")
    assert [s.name for s in dashboard.view.rows][0] == "Aarav Sharma"
    dashboard.set_category("top")
    assert [s.rank for s in dashboard.view.rows] == [2, 1]
    with pytest.raises(ValueError):
        dashboard.set_category("middle")
    with pytest.raises(ValueError):
        dashboard.set_sort("grade")


def test_search_is_debounced(roster, clock):
    dashboard = Dashboard(roster, config=DashboardConfig(search_debounce_seconds=0.15), clock=clock)
    dashboard.request_search("104")
    clock.now = 0.1
    assert dashboard.poll() is False
    dashboard.request_search("Vikram")
    clock.now = 0.2
    assert dashboard.poll() is False
    assert len(dashboard.view.rows) == 5
    clock.now = 0.3
    assert dashboard.poll() is True
    assert dashboard.search == "Vikram"
    assert [s.roll_no for s in dashboard.view.rows] == ["105"]
    assert dashboard.poll() is False


def test_csv_lines_follow_roster(dashboard):
    lines = dashboard.csv_lines()
    assert len(lines) == 6
    assert lines[1].startswith("1,104,Ananya Singh")


def test_print_report_modes(dashboard):
    assert dashboard.print_report().mode == "all"
    dashboard.toggle_selection(103, True)
    report = dashboard.print_report()
    assert report.mode == "single"
    assert [s.id for s in report.students] == [103]
    assert report.chart is not None
    dashboard.toggle_selection(101, True)
    assert dashboard.print_report().mode == "all"


@pytest.mark.parametrize("raw,expected", [("0", 0), (" 42 ", 42), ("100", 100), (55, 55), (60.0, 60), ("+7", 7)])
def test_parse_mark_accepts(raw, expected):
    assert parse_mark(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "12abc", "1e2", "-1", "101", None, True, 7.5])
def test_parse_mark_rejects(raw):
    with pytest.raises(ValidationError):
        parse_mark(raw)


def test_every_subject_editable(dashboard):
    for subject in SUBJECTS:
        assert dashboard.edit_mark(102, subject, "70")
    assert dashboard.view.ranked[2].id == 102


def test_edit_mark_redraws_open_comparison(dashboard, renderer):
    dashboard.toggle_selection(101, True)
    dashboard.toggle_selection(102, True)
    dashboard.open_comparison()
    before = renderer.last("draw_comparison")
    assert next(w for w in before.winners if w.subject == "math").name == "Aarav Sharma"

    assert dashboard.edit_mark(102, "math", "100")
    chart = renderer.last("draw_comparison")
    assert chart is not before
    assert next(w for w in chart.winners if w.subject == "math").name == "Priya Patel"

    # default 350px canvas minus 30 top and 50 bottom padding
    math_bars = [p for p in chart.primitives if isinstance(p, Rect)][:2]
    assert math_bars[0].height == pytest.approx(92 / 100 * 270)
    assert math_bars[1].height == pytest.approx(270)


def test_edit_mark_redraws_focused_radar_and_insight(dashboard, renderer):
    dashboard.click_row(103)
    assert renderer.last("render_insight").insight.average == 64.6

    assert dashboard.edit_mark(103, "math", "0")
    radar = renderer.last("draw_radar")
    assert radar.points[0] == pytest.approx(radar.center)
    panel = renderer.last("render_insight")
    assert panel.student.id == 103
    assert panel.insight.average == 51.6


def test_dashboard_rejects_duplicate_ids(student_factory):
    with pytest.raises(ValidationError):
        Dashboard([student_factory(1, 50, roll_no="A"), student_factory(1, 60, roll_no="B")])


def test_dashboard_rejects_duplicate_roll_numbers(student_factory):
    with pytest.raises(ValidationError):
        Dashboard([student_factory(1, 50, roll_no="A"), student_factory(2, 60, roll_no="A")])
