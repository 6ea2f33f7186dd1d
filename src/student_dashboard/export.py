import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .charts import RadarChart, radar_chart
from .metrics import TABLE_COLUMNS, grade, rank_students
from .models import SUBJECTS, NotFoundError, RankedStudent, Student
from .selection import SelectionState

SAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")

PRINT_SINGLE = "single"
PRINT_ALL = "all"


def format_number(value: float) -> str:
    """Render numbers like the dashboard table does: 55 rather than 55.0."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def csv_row(student: RankedStudent) -> List[str]:
    return (
        [str(student.rank), student.roll_no, student.name]
        + [str(student.marks[subject]) for subject in SUBJECTS]
        + [format_number(student.average), grade(student.average)]
    )


def csv_lines(roster: Iterable[Student]) -> List[str]:
    """Header plus one row per student in full rank order.

    Fields are joined with plain commas and never quoted, so a comma inside
    a name shifts the remaining columns of that row.
    """

    lines = [",".join(TABLE_COLUMNS)]
    lines.extend(",".join(csv_row(student)) for student in rank_students(roster))
    return lines


def csv_content(roster: Iterable[Student]) -> str:
    return "\n".join(csv_lines(roster))


def sanitize_filename(name: str) -> str:
    """Return a filesystem-safe file name; reject traversal; default 'export'."""
    raw = str(name or "").strip()
    parts = [p for p in raw.replace("\\", "/").split("/") if p not in ("", ".")]
    if any(p == ".." for p in parts):
        raise ValueError("Path traversal not allowed")
    cleaned = SAFE_FILENAME_RE.sub("_", "_".join(parts))
    while ".." in cleaned:
        cleaned = cleaned.replace("..", ".")
    return cleaned.lstrip(".") or "export"


def build_export_path(base_dir: Path, filename: str) -> Path:
    path = base_dir / sanitize_filename(filename)
    resolved_base = base_dir.resolve()
    resolved_path = path.resolve()
    if resolved_base not in resolved_path.parents:
        raise ValueError("Export path escapes base directory")
    return resolved_path


def write_csv(roster: Iterable[Student], base_dir: Path, filename: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    path = build_export_path(base_dir, filename)
    path.write_text(csv_content(roster) + "\n", encoding="utf-8")
    return path


def print_mode(selection: SelectionState) -> str:
    return PRINT_SINGLE if len(selection.comparison) == 1 else PRINT_ALL


@dataclass
class PrintReport:
    mode: str
    students: List[RankedStudent]
    chart: Optional[RadarChart] = None
    title: str = "Student Performance Report"


def print_report(
    roster: List[Student],
    selection: SelectionState,
    width: float = 400,
    height: float = 400,
    margin: float = 50,
    label_offset: float = 25,
) -> PrintReport:
    """Layout for printing: one student with their radar, or the full table."""

    ranked = rank_students(roster)
    if print_mode(selection) == PRINT_SINGLE:
        target = selection.comparison[0]
        chosen = [student for student in ranked if student.id == target]
        if not chosen:
            raise NotFoundError(f"Student {target} is not on the roster")
        student = next(s for s in roster if s.id == target)
        chart = radar_chart(student, width, height, margin, label_offset)
        return PrintReport(
            mode=PRINT_SINGLE,
            students=chosen,
            chart=chart,
            title=f"{student.name}'s Performance Report",
        )
    return PrintReport(mode=PRINT_ALL, students=ranked)
