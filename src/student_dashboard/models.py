from dataclasses import dataclass, field
from typing import Dict, List, Mapping

SUBJECTS = ["math", "science", "english", "history", "computer"]

SUBJECT_LABELS = {
    "math": "Math",
    "science": "Science",
    "english": "English",
    "history": "History",
    "computer": "Computer",
}

MIN_MARK = 0
MAX_MARK = 100

EXCELLENT = "Excellent"
AVERAGE = "Average"
NEEDS_IMPROVEMENT = "Needs Improvement"


class ValidationError(ValueError):
    """Raised when input would break a roster invariant."""


class NotFoundError(LookupError):
    """Raised when an id does not resolve to an active student."""


@dataclass
class Student:
    id: int
    roll_no: str
    name: str
    marks: Dict[str, int]

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Student":
        marks = data.get("marks") or {}
        missing = [subject for subject in SUBJECTS if subject not in marks]
        if missing:
            raise ValidationError(f"Missing marks for: {', '.join(missing)}")
        return cls(
            id=int(data["id"]),
            roll_no=str(data.get("roll_no", "")),
            name=str(data.get("name", "")),
            marks={subject: int(marks[subject]) for subject in SUBJECTS},
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "roll_no": self.roll_no,
            "name": self.name,
            "marks": dict(self.marks),
        }


@dataclass(frozen=True)
class RankedStudent:
    """A student annotated with the average and rank of one derivation pass."""

    id: int
    roll_no: str
    name: str
    marks: Dict[str, int]
    average: float
    rank: int


@dataclass(frozen=True)
class Insight:
    status: str
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    average: float = 0.0
