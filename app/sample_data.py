from typing import List

import pandas as pd

from student_dashboard.io import roster_to_frame
from student_dashboard.models import Student


SAMPLE_STUDENTS = [
    {
        "id": 104,
        "roll_no": "104",
        "name": "Ananya Singh",
        "marks": {"math": 95, "science": 92, "english": 88, "history": 90, "computer": 98},
    },
    {
        "id": 101,
        "roll_no": "101",
        "name": "Aarav Sharma",
        "marks": {"math": 92, "science": 88, "english": 76, "history": 85, "computer": 95},
    },
    {
        "id": 103,
        "roll_no": "103",
        "name": "Rohan Kumar",
        "marks": {"math": 65, "science": 58, "english": 70, "history": 62, "computer": 68},
    },
    {
        "id": 102,
        "roll_no": "102",
        "name": "Priya Patel",
        "marks": {"math": 55, "science": 52, "english": 58, "history": 54, "computer": 56},
    },
    {
        "id": 105,
        "roll_no": "105",
        "name": "Vikram Reddy",
        "marks": {"math": 45, "science": 52, "english": 48, "history": 40, "computer": 55},
    },
]


def sample_roster() -> List[Student]:
    return [Student.from_dict(row) for row in SAMPLE_STUDENTS]


def load_sample_dataframe() -> pd.DataFrame:
    return roster_to_frame(sample_roster())
