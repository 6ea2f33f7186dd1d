"""Geometry for the radar and comparison charts.

Every function here is pure: it takes student data plus canvas dimensions
and returns a flat list of drawable primitives in canvas coordinates
(origin top-left, y growing downwards). Primitives carry a ``role`` that the
renderer maps onto colours and fonts.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from .models import MAX_MARK, SUBJECT_LABELS, SUBJECTS, Student

GRID_STEPS = 5
GRID_STEP_VALUE = MAX_MARK // GRID_STEPS
START_ANGLE = -math.pi / 2
POINT_RADIUS = 5

BAR_WIDTH_RATIO = 0.35
BAR_GAP_RATIO = 0.1
VALUE_LABEL_OFFSET = 8
WINNER_MARK_OFFSET = 20
SUBJECT_LABEL_OFFSET = 10
AXIS_LABEL_OFFSET = 10
WINNER_MARK = "★"


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    role: str = "grid"


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    role: str = "grid"
    filled: bool = False


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Tuple[float, float], ...]
    role: str = "series"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    role: str = "series"


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    role: str = "label"
    anchor: str = "middle"


Primitive = Union[Line, Circle, Polygon, Rect, Text]


@dataclass(frozen=True)
class Padding:
    top: float = 30
    right: float = 30
    bottom: float = 50
    left: float = 50


@dataclass
class RadarChart:
    width: float
    height: float
    center: Tuple[float, float]
    radius: float
    primitives: List[Primitive] = field(default_factory=list)
    points: List[Tuple[float, float]] = field(default_factory=list)
    title: str = ""


@dataclass(frozen=True)
class SubjectWinner:
    subject: str
    label: str
    student_id: int
    name: str


@dataclass
class ComparisonChart:
    width: float
    height: float
    names: Tuple[str, str]
    primitives: List[Primitive] = field(default_factory=list)
    winners: List[SubjectWinner] = field(default_factory=list)


def _polar(cx: float, cy: float, radius: float, angle: float) -> Tuple[float, float]:
    return cx + radius * math.cos(angle), cy + radius * math.sin(angle)


def axis_angles(count: int = len(SUBJECTS)) -> List[float]:
    step = 2 * math.pi / count
    return [START_ANGLE + i * step for i in range(count)]


def _radar_frame(width: float, height: float, margin: float, label_offset: float) -> RadarChart:
    cx, cy = width / 2, height / 2
    radius = min(width, height) / 2 - margin
    chart = RadarChart(width=width, height=height, center=(cx, cy), radius=radius)

    for i in range(1, GRID_STEPS + 1):
        chart.primitives.append(Circle(cx, cy, radius * i / GRID_STEPS, role="grid"))

    for subject, angle in zip(SUBJECTS, axis_angles()):
        x, y = _polar(cx, cy, radius, angle)
        chart.primitives.append(Line(cx, cy, x, y, role="axis"))
        lx, ly = _polar(cx, cy, radius + label_offset, angle)
        chart.primitives.append(Text(lx, ly, SUBJECT_LABELS[subject], role="axis-label"))
    return chart


def radar_chart(student: Student, width: float, height: float, margin: float = 50, label_offset: float = 25) -> RadarChart:
    """Project one student's marks onto a five-axis radar.

    Axes start at 12 o'clock and run clockwise in subject order; a mark of
    100 lands on the outer ring and 0 on the center.
    """

    chart = _radar_frame(width, height, margin, label_offset)
    cx, cy = chart.center
    chart.title = f"{student.name}'s Performance"

    for i in range(1, GRID_STEPS + 1):
        y = cy - chart.radius * i / GRID_STEPS - 5
        chart.primitives.append(Text(cx + 5, y, str(i * GRID_STEP_VALUE), role="scale-label"))

    for subject, angle in zip(SUBJECTS, axis_angles()):
        value = student.marks[subject] / MAX_MARK
        chart.points.append(_polar(cx, cy, chart.radius * value, angle))

    chart.primitives.append(Polygon(tuple(chart.points), role="series"))
    for x, y in chart.points:
        chart.primitives.append(Circle(x, y, POINT_RADIUS, role="series", filled=True))
    return chart


def empty_radar_chart(width: float, height: float, margin: float = 50, label_offset: float = 25) -> RadarChart:
    chart = _radar_frame(width, height, margin, label_offset)
    chart.title = "Select a student to view radar chart"
    return chart


def subject_winner(first: Student, second: Student, subject: str) -> Optional[Student]:
    a, b = first.marks[subject], second.marks[subject]
    if a > b:
        return first
    if b > a:
        return second
    return None


def comparison_chart(
    first: Student,
    second: Student,
    width: float,
    height: float,
    padding: Optional[Padding] = None,
) -> ComparisonChart:
    """Grouped bars, one slot per subject, for two students side by side.

    The strictly higher mark in a slot wins a star marker and a legend
    entry; equal marks produce neither.
    """

    padding = padding or Padding()
    chart_width = width - padding.left - padding.right
    chart_height = height - padding.top - padding.bottom
    baseline = padding.top + chart_height
    chart = ComparisonChart(width=width, height=height, names=(first.name, second.name))

    for i in range(GRID_STEPS + 1):
        y = baseline - chart_height * i / GRID_STEPS
        chart.primitives.append(Line(padding.left, y, width - padding.right, y, role="grid"))
        chart.primitives.append(Text(padding.left - AXIS_LABEL_OFFSET, y, str(i * GRID_STEP_VALUE), role="axis-label", anchor="end"))

    group_width = chart_width / len(SUBJECTS)
    bar_width = group_width * BAR_WIDTH_RATIO
    bar_gap = group_width * BAR_GAP_RATIO
    pair: Sequence[Student] = (first, second)

    for index, subject in enumerate(SUBJECTS):
        group_x = padding.left + index * group_width + group_width / 2
        winner = subject_winner(first, second, subject)

        for bar_index, student in enumerate(pair):
            mark = student.marks[subject]
            bar_height = mark / MAX_MARK * chart_height
            bar_x = group_x - bar_width - bar_gap / 2 if bar_index == 0 else group_x + bar_gap / 2
            bar_y = baseline - bar_height
            role = "series" if bar_index == 0 else "series-alt"
            chart.primitives.append(Rect(bar_x, bar_y, bar_width, bar_height, role=role))
            chart.primitives.append(Text(bar_x + bar_width / 2, bar_y - VALUE_LABEL_OFFSET, str(mark), role="value-label"))
            if winner is student:
                chart.primitives.append(Text(bar_x + bar_width / 2, bar_y - WINNER_MARK_OFFSET, WINNER_MARK, role="winner"))

        chart.primitives.append(Text(group_x, baseline + SUBJECT_LABEL_OFFSET, SUBJECT_LABELS[subject], role="axis-label"))
        if winner is not None:
            chart.winners.append(SubjectWinner(subject=subject, label=SUBJECT_LABELS[subject], student_id=winner.id, name=winner.name))

    return chart
