from pathlib import Path
from typing import IO, Iterable, List

import pandas as pd

from .models import MAX_MARK, MIN_MARK, SUBJECTS, Student, ValidationError

ROSTER_COLUMNS = ["id", "roll_no", "name"] + SUBJECTS
REQUIRED_COLUMNS = ["roll_no", "name"] + SUBJECTS


def _canonical_header(header: object) -> str:
    return "_".join(str(header).strip().lower().replace(".", "").split())


def read_csv(source: str | Path | IO[str] | IO[bytes]) -> pd.DataFrame:
    # Keep roll numbers such as "007" as text.
    return pd.read_csv(source, dtype=str, keep_default_na=False)


def normalize_roster(df: pd.DataFrame) -> pd.DataFrame:
    data = df.rename(columns=_canonical_header)
    missing = [col for col in REQUIRED_COLUMNS if col not in data.columns]
    if missing:
        raise ValidationError(f"Roster missing required columns: {missing}")

    data = data.copy()
    for col in ["roll_no", "name"]:
        data.loc[:, col] = data[col].astype(str).str.strip()
        if (data[col] == "").any():
            raise ValidationError(f"Missing required values in '{col}'")

    duplicated = data["roll_no"][data["roll_no"].duplicated()].unique().tolist()
    if duplicated:
        raise ValidationError(f"Duplicate roll numbers: {duplicated}")

    for subject in SUBJECTS:
        marks = pd.to_numeric(data[subject], errors="coerce")
        if marks.isna().any() or (marks != marks.round()).any():
            raise ValidationError(f"'{subject}' column contains non-integer marks")
        if ((marks < MIN_MARK) | (marks > MAX_MARK)).any():
            raise ValidationError(f"'{subject}' marks must be between {MIN_MARK} and {MAX_MARK}")
        data[subject] = marks.astype(int)

    if "id" in data.columns and (data["id"].astype(str).str.strip() != "").all():
        ids = pd.to_numeric(data["id"], errors="coerce")
        if ids.isna().any() or ids.duplicated().any():
            raise ValidationError("'id' column must hold unique integers")
        data["id"] = ids.astype(int)
    else:
        data["id"] = range(1, len(data) + 1)

    return data[ROSTER_COLUMNS].reset_index(drop=True)


def frame_to_roster(df: pd.DataFrame) -> List[Student]:
    data = normalize_roster(df)
    return [
        Student(
            id=int(row["id"]),
            roll_no=str(row["roll_no"]),
            name=str(row["name"]),
            marks={subject: int(row[subject]) for subject in SUBJECTS},
        )
        for _, row in data.iterrows()
    ]


def read_roster(source: str | Path | IO[str] | IO[bytes]) -> List[Student]:
    return frame_to_roster(read_csv(source))


def roster_to_frame(roster: Iterable[Student]) -> pd.DataFrame:
    rows = []
    for student in roster:
        row = {"id": student.id, "roll_no": student.roll_no, "name": student.name}
        row.update({subject: student.marks[subject] for subject in SUBJECTS})
        rows.append(row)
    return pd.DataFrame(rows, columns=ROSTER_COLUMNS)


def write_roster(roster: Iterable[Student], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    roster_to_frame(roster).to_csv(path, index=False)
    return path
