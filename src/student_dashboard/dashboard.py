"""Application state and the mutation cascade.

A ``Dashboard`` owns one roster and one selection state. Every mutation
(add, delete, edit, select, query change) ends in ``refresh``, which
re-derives ranks, the filtered view, the insight panel and both charts from
the roster and pushes them to the attached renderer. Nothing derived
survives between refreshes.
"""

import copy
import logging
import re
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Protocol

from . import export
from .charts import ComparisonChart, RadarChart, comparison_chart, empty_radar_chart, radar_chart
from .config import DashboardConfig
from .debounce import Debouncer
from .invariants import check_unique_ids, check_unique_roll_numbers
from .metrics import class_summary, rank_students
from .models import MAX_MARK, MIN_MARK, SUBJECTS, NotFoundError, RankedStudent, Student, ValidationError
from .query import CATEGORIES, SORT_KEYS, apply_query
from .selection import InsightPanel, SelectionState

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?\d+")


class Renderer(Protocol):
    def render_roster(self, view: List[RankedStudent], selection: SelectionState) -> None: ...

    def render_insight(self, panel: InsightPanel) -> None: ...

    def draw_radar(self, chart: RadarChart) -> None: ...

    def draw_empty_radar(self, chart: RadarChart) -> None: ...

    def draw_comparison(self, chart: ComparisonChart) -> None: ...

    def close_comparison(self) -> None: ...


@dataclass
class DashboardView:
    ranked: List[RankedStudent]
    rows: List[RankedStudent]
    panel: InsightPanel
    radar: RadarChart
    radar_empty: bool
    comparison: Optional[ComparisonChart] = None
    summary: Dict[str, object] = field(default_factory=dict)


def parse_mark(raw: object) -> int:
    """Parse an edited or submitted mark; raise ValidationError when unusable."""
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid mark: {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise ValidationError(f"Mark must be a whole number: {raw!r}")
        value = int(raw)
    else:
        text = str(raw if raw is not None else "").strip()
        if not _INTEGER_RE.fullmatch(text):
            raise ValidationError(f"Mark must be a whole number: {text!r}")
        value = int(text)
    if not MIN_MARK <= value <= MAX_MARK:
        raise ValidationError(f"Mark must be between {MIN_MARK} and {MAX_MARK}: {value}")
    return value


class MarkEdit:
    """One in-progress cell edit; nothing changes until ``commit``."""

    def __init__(self, dashboard: "Dashboard", student_id: int, subject: str, committed: int):
        self.dashboard = dashboard
        self.student_id = student_id
        self.subject = subject
        self.committed = committed
        self.text = str(committed)

    def type(self, text: str) -> None:
        self.text = text

    def commit(self, raw: Optional[object] = None) -> bool:
        if raw is not None:
            self.text = str(raw)
        accepted = self.dashboard.edit_mark(self.student_id, self.subject, self.text)
        if accepted:
            self.committed = self.dashboard.get_student(self.student_id).marks[self.subject]
        self.text = str(self.committed)
        return accepted

    def cancel(self) -> int:
        self.text = str(self.committed)
        return self.committed


class Dashboard:
    def __init__(
        self,
        roster: Optional[Iterable[Student]] = None,
        config: Optional[DashboardConfig] = None,
        renderer: Optional[Renderer] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or DashboardConfig()
        self.roster: List[Student] = copy.deepcopy(list(roster or []))
        if check_unique_ids(self.roster):
            raise ValidationError("Roster contains duplicate student ids")
        if check_unique_roll_numbers(self.roster):
            raise ValidationError("Roster contains duplicate roll numbers")
        self.selection = SelectionState()
        self.renderer = renderer
        self.search = ""
        self.category = "all"
        self.sort = "rank"
        self.debouncer = Debouncer(self.config.search_debounce_seconds, clock=clock)
        self._lock = threading.RLock()
        self.view: Optional[DashboardView] = None
        self.refresh()

    # lookups

    def get_student(self, student_id: int) -> Student:
        for student in self.roster:
            if student.id == student_id:
                return student
        raise NotFoundError(f"Student {student_id} is not on the roster")

    def next_id(self) -> int:
        return max((student.id for student in self.roster), default=0) + 1

    # cascade

    def compute_view(self) -> DashboardView:
        ranked = rank_students(self.roster)
        rows = apply_query(ranked, self.search, self.category, self.sort)
        panel = self.selection.resolve_panel(self.roster)
        cfg = self.config

        radar = None
        if self.selection.focused is not None:
            try:
                focused = self.get_student(self.selection.focused)
                radar = radar_chart(focused, cfg.radar_width, cfg.radar_height, cfg.radar_margin, cfg.radar_label_offset)
            except NotFoundError:
                logger.debug("Focused student %s no longer exists", self.selection.focused)
                self.selection.focused = None
        radar_empty = radar is None
        if radar is None:
            radar = empty_radar_chart(cfg.radar_width, cfg.radar_height, cfg.radar_margin, cfg.radar_label_offset)

        comparison = None
        if self.selection.comparison_open:
            first, second = (self.get_student(sid) for sid in self.selection.comparison)
            comparison = comparison_chart(first, second, cfg.comparison_width, cfg.comparison_height, cfg.comparison_padding)

        return DashboardView(
            ranked=ranked,
            rows=rows,
            panel=panel,
            radar=radar,
            radar_empty=radar_empty,
            comparison=comparison,
            summary=class_summary(ranked),
        )

    def refresh(self) -> DashboardView:
        with self._lock:
            previous = self.view
            self.view = self.compute_view()
            logger.debug("Cascade: %d students, %d shown", len(self.view.ranked), len(self.view.rows))
            if previous is not None and previous.comparison is not None and self.view.comparison is None and self.renderer:
                self.renderer.close_comparison()
            self.render()
            return self.view

    def render(self, renderer: Optional[Renderer] = None) -> None:
        """Push the current view to a renderer (the attached one by default)."""
        target = renderer or self.renderer
        if target is None or self.view is None:
            return
        view = self.view
        target.render_roster(view.rows, self.selection)
        target.render_insight(view.panel)
        if view.radar_empty:
            target.draw_empty_radar(view.radar)
        else:
            target.draw_radar(view.radar)
        if view.comparison is not None:
            target.draw_comparison(view.comparison)

    # mutations

    def add_student(self, name: str, roll_no: str, marks: Mapping[str, object]) -> Student:
        name = str(name or "").strip()
        roll_no = str(roll_no or "").strip()
        with self._lock:
            if not name:
                raise ValidationError("Student name is required")
            if not roll_no:
                raise ValidationError("Roll number is required")
            if any(student.roll_no == roll_no for student in self.roster):
                logger.warning("Rejected add: roll number %s already exists", roll_no)
                raise ValidationError("Roll Number already exists!")

            parsed = {}
            for subject in SUBJECTS:
                if subject not in marks:
                    raise ValidationError(f"Missing mark for {subject}")
                parsed[subject] = parse_mark(marks[subject])

            student = Student(id=self.next_id(), roll_no=roll_no, name=name, marks=parsed)
            self.roster.append(student)
            logger.info("Added student %s (roll %s, id %d)", name, roll_no, student.id)
            self.refresh()
            return student

    def delete_student(self, student_id: int) -> bool:
        with self._lock:
            remaining = [student for student in self.roster if student.id != student_id]
            removed = len(remaining) != len(self.roster)
            self.roster = remaining
            self.selection.purge(student_id)
            if removed:
                logger.info("Deleted student id %d", student_id)
            else:
                logger.debug("Delete ignored: student %s not found", student_id)
            self.refresh()
            return removed

    def edit_mark(self, student_id: int, subject: str, raw: object) -> bool:
        """Commit an edited mark; returns False when the edit is rejected or stale."""
        if subject not in SUBJECTS:
            raise ValidationError(f"Unknown subject '{subject}'")
        with self._lock:
            try:
                student = self.get_student(student_id)
            except NotFoundError:
                logger.debug("Edit ignored: student %s not found", student_id)
                return False
            try:
                value = parse_mark(raw)
            except ValidationError as exc:
                logger.warning("Rejected edit for student %d %s: %s", student_id, subject, exc)
                self.render()
                return False
            student.marks[subject] = value
            logger.info("Set %s for student %d to %d", subject, student_id, value)
            self.refresh()
            return True

    def begin_edit(self, student_id: int, subject: str) -> Optional[MarkEdit]:
        if subject not in SUBJECTS:
            raise ValidationError(f"Unknown subject '{subject}'")
        try:
            student = self.get_student(student_id)
        except NotFoundError:
            logger.debug("Edit not started: student %s not found", student_id)
            return None
        return MarkEdit(self, student_id, subject, student.marks[subject])

    # selection

    def toggle_selection(self, student_id: int, checked: bool) -> bool:
        with self._lock:
            if checked and not any(student.id == student_id for student in self.roster):
                logger.debug("Selection ignored: student %s not found", student_id)
                return False
            accepted = self.selection.toggle(student_id, checked)
            self.refresh()
            return accepted

    def click_row(self, student_id: int) -> None:
        with self._lock:
            if not any(student.id == student_id for student in self.roster):
                logger.debug("Row click ignored: student %s not found", student_id)
                return
            self.selection.click(student_id)
            self.refresh()

    def open_comparison(self) -> bool:
        with self._lock:
            opened = self.selection.open_comparison()
            if opened:
                self.refresh()
            return opened

    def close_comparison(self) -> None:
        with self._lock:
            was_open = self.selection.comparison_open
            self.selection.close_comparison()
            if was_open:
                self.refresh()

    # query criteria

    def request_search(self, term: str) -> None:
        """Debounced search; the term applies once ``poll`` finds it due."""
        self.debouncer.schedule(self.set_search, term)

    def poll(self) -> bool:
        with self._lock:
            return self.debouncer.poll()

    def set_search(self, term: str) -> None:
        with self._lock:
            self.search = term or ""
            self.refresh()

    def set_category(self, category: str) -> None:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category filter '{category}'")
        with self._lock:
            self.category = category
            self.refresh()

    def set_sort(self, sort: str) -> None:
        if sort not in SORT_KEYS:
            raise ValueError(f"Unknown sort key '{sort}'")
        with self._lock:
            self.sort = sort
            self.refresh()

    # export

    def csv_lines(self) -> List[str]:
        return export.csv_lines(self.roster)

    def print_report(self) -> export.PrintReport:
        cfg = self.config
        return export.print_report(
            self.roster,
            self.selection,
            cfg.radar_width,
            cfg.radar_height,
            cfg.radar_margin,
            cfg.radar_label_offset,
        )
