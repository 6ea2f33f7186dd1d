from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping

import pandas as pd

from .models import (
    AVERAGE,
    EXCELLENT,
    NEEDS_IMPROVEMENT,
    SUBJECT_LABELS,
    SUBJECTS,
    Insight,
    RankedStudent,
    Student,
)

GRADE_BANDS = [(90, "A+"), (75, "A"), (60, "B"), (50, "C")]
FAIL = "Fail"

STRENGTH_THRESHOLD = 75
WEAKNESS_THRESHOLD = 50

RANK_BADGES = {1: "🥇", 2: "🥈", 3: "🥉"}

TABLE_COLUMNS = ["Rank", "Roll No", "Name"] + [SUBJECT_LABELS[s] for s in SUBJECTS] + ["Average", "Grade"]


def _round_tenth(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def calculate_average(marks: Mapping[str, int]) -> float:
    """Mean of the subject marks, rounded half away from zero to one decimal.

    The mean is computed with Decimal so a value exactly on the .x5 boundary
    rounds up instead of drifting with binary float error.
    """
    values = [marks[subject] for subject in SUBJECTS]
    return _round_tenth(Decimal(sum(values)) / Decimal(len(values)))


def grade(average: float) -> str:
    for threshold, label in GRADE_BANDS:
        if average >= threshold:
            return label
    return FAIL


def performance_class(mark: float) -> str:
    if mark >= STRENGTH_THRESHOLD:
        return EXCELLENT
    if mark >= WEAKNESS_THRESHOLD:
        return AVERAGE
    return NEEDS_IMPROVEMENT


def rank_badge(rank: int) -> str:
    return RANK_BADGES.get(rank, "")


def roster_frame(students: Iterable[Student]) -> pd.DataFrame:
    rows = []
    for position, student in enumerate(students):
        row = {
            "id": student.id,
            "roll_no": student.roll_no,
            "name": student.name,
            "position": position,
        }
        row.update({subject: student.marks[subject] for subject in SUBJECTS})
        row["average"] = calculate_average(student.marks)
        rows.append(row)
    return pd.DataFrame(rows, columns=["id", "roll_no", "name", "position"] + SUBJECTS + ["average"])


def rank_students(students: Iterable[Student]) -> List[RankedStudent]:
    """Rank the roster by average, best first.

    Equal averages share a rank and the next distinct average skips ahead
    (1, 2, 2, 4). Ties are listed by id ascending.
    """

    students = list(students)
    data = roster_frame(students)
    if data.empty:
        return []

    data = data.sort_values(by=["average", "id"], ascending=[False, True], kind="mergesort")
    data["rank"] = data["average"].rank(method="min", ascending=False).astype(int)

    ranked = []
    for _, row in data.iterrows():
        student = students[int(row["position"])]
        ranked.append(
            RankedStudent(
                id=student.id,
                roll_no=student.roll_no,
                name=student.name,
                marks=dict(student.marks),
                average=float(row["average"]),
                rank=int(row["rank"]),
            )
        )
    return ranked


def insight(student: Student) -> Insight:
    average = calculate_average(student.marks)
    strengths = []
    weaknesses = []
    for subject in SUBJECTS:
        mark = student.marks[subject]
        if mark >= STRENGTH_THRESHOLD:
            strengths.append(SUBJECT_LABELS[subject])
        elif mark < WEAKNESS_THRESHOLD:
            weaknesses.append(SUBJECT_LABELS[subject])
    return Insight(
        status=performance_class(average),
        strengths=strengths,
        weaknesses=weaknesses,
        average=average,
    )


def ranked_frame(ranked: Iterable[RankedStudent]) -> pd.DataFrame:
    """Table view of ranked students, one row per student in the given order."""

    rows = []
    for student in ranked:
        row = {"id": student.id, "Rank": student.rank, "Roll No": student.roll_no, "Name": student.name}
        row.update({SUBJECT_LABELS[subject]: student.marks[subject] for subject in SUBJECTS})
        row["Average"] = student.average
        row["Grade"] = grade(student.average)
        rows.append(row)
    return pd.DataFrame(rows, columns=["id"] + TABLE_COLUMNS)


def class_summary(ranked: Iterable[RankedStudent]) -> Dict[str, object]:
    data = ranked_frame(ranked)
    if data.empty:
        return {
            "students": 0,
            "class_average": float("nan"),
            "top_performers": 0,
            "below_pass": 0,
            "top_student": "",
        }
    return {
        "students": len(data),
        "class_average": _round_tenth(sum(Decimal(str(value)) for value in data["Average"]) / len(data)),
        "top_performers": int((data["Average"] >= STRENGTH_THRESHOLD).sum()),
        "below_pass": int((data["Average"] < WEAKNESS_THRESHOLD).sum()),
        "top_student": str(data.iloc[0]["Name"]),
    }
