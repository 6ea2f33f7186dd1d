import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .metrics import grade, insight
from .models import Insight, Student

logger = logging.getLogger(__name__)

MAX_COMPARISON = 2

PANEL_INSIGHT = "insight"
PANEL_MULTIPLE = "multiple"
PANEL_EMPTY = "empty"

PLACEHOLDER_TEXT = {
    PANEL_MULTIPLE: "Multiple students selected. Analysis hidden.",
    PANEL_EMPTY: "Hover over or click a student row to see detailed insights.",
}


@dataclass(frozen=True)
class InsightPanel:
    kind: str
    student: Optional[Student] = None
    insight: Optional[Insight] = None
    grade: Optional[str] = None

    @property
    def placeholder(self) -> Optional[str]:
        return PLACEHOLDER_TEXT.get(self.kind)


@dataclass
class SelectionState:
    """Checkbox comparison slot, row-click focus slot, and the comparison view flag."""

    comparison: List[int] = field(default_factory=list)
    focused: Optional[int] = None
    comparison_open: bool = False

    def toggle(self, student_id: int, checked: bool) -> bool:
        """Apply a checkbox change; returns False when a check is rejected."""
        if checked:
            if student_id in self.comparison:
                return True
            if len(self.comparison) >= MAX_COMPARISON:
                logger.warning("Rejected selection of %s: %d students already selected", student_id, MAX_COMPARISON)
                return False
            self.comparison.append(student_id)
            return True

        self.comparison = [sid for sid in self.comparison if sid != student_id]
        self._close_if_incomplete()
        return True

    def click(self, student_id: int) -> None:
        self.focused = student_id

    def purge(self, student_id: int) -> None:
        self.comparison = [sid for sid in self.comparison if sid != student_id]
        if self.focused == student_id:
            self.focused = None
        self._close_if_incomplete()

    def open_comparison(self) -> bool:
        if len(self.comparison) != MAX_COMPARISON:
            return False
        self.comparison_open = True
        return True

    def close_comparison(self) -> None:
        self.comparison_open = False

    def _close_if_incomplete(self) -> None:
        if self.comparison_open and len(self.comparison) < MAX_COMPARISON:
            logger.debug("Closing comparison view: %d student(s) selected", len(self.comparison))
            self.comparison_open = False

    def resolve_panel(self, roster: Iterable[Student]) -> InsightPanel:
        """Pick what the insight panel shows.

        Two checkbox selections hide the analysis; a single checkbox selection
        wins over the row-click focus; otherwise the focused student is shown.
        """

        by_id = {student.id: student for student in roster}
        if len(self.comparison) >= MAX_COMPARISON:
            return InsightPanel(kind=PANEL_MULTIPLE)

        candidates = list(self.comparison)
        if self.focused is not None:
            candidates.append(self.focused)

        for student_id in candidates:
            student = by_id.get(student_id)
            if student is None:
                continue
            derived = insight(student)
            return InsightPanel(kind=PANEL_INSIGHT, student=student, insight=derived, grade=grade(derived.average))

        return InsightPanel(kind=PANEL_EMPTY)
