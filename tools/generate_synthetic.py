#!/usr/bin/env python3
"""Generate a synthetic class roster for demos.

Usage:
    python tools/generate_synthetic.py --output data/synthetic_roster.csv --students 40 --seed 42

Each student gets an ability level and per-subject aptitude; marks are drawn
around those and clipped to 0-100. The output uses the roster CSV format that
``student_dashboard.io.read_roster`` loads.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd

from student_dashboard.io import ROSTER_COLUMNS
from student_dashboard.models import MAX_MARK, MIN_MARK, SUBJECTS

FIRST_NAMES = ["Aarav", "Ananya", "Diya", "Ishaan", "Kavya", "Meera", "Nikhil", "Priya", "Rohan", "Saanvi", "Tara", "Vikram"]
LAST_NAMES = ["Sharma", "Singh", "Patel", "Kumar", "Reddy", "Iyer", "Gupta", "Nair", "Das", "Mehta"]


def generate_synthetic_roster(
    output_path: Path,
    n_students: int = 40,
    seed: int = 42,
    first_roll: int = 101,
) -> pd.DataFrame:
    if n_students < 1:
        raise ValueError("n_students must be at least 1")

    rng = np.random.default_rng(seed)

    # Ability spreads the class across grade bands; aptitude tilts each subject.
    ability = rng.normal(66, 14, size=n_students)
    aptitude = rng.normal(0, 8, size=(n_students, len(SUBJECTS)))
    noise = rng.normal(0, 5, size=(n_students, len(SUBJECTS)))
    marks = np.clip(np.rint(ability[:, None] + aptitude + noise), MIN_MARK, MAX_MARK).astype(int)

    rows = []
    for idx in range(n_students):
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        row = {"id": idx + 1, "roll_no": str(first_roll + idx), "name": name}
        row.update({subject: int(marks[idx, col]) for col, subject in enumerate(SUBJECTS)})
        rows.append(row)

    result = pd.DataFrame(rows, columns=ROSTER_COLUMNS)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output_path, index=False)
    return result


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic student roster for demos")
    parser.add_argument("--output", type=Path, default=Path("data/synthetic_roster.csv"), help="Where to write the roster CSV")
    parser.add_argument("--students", type=int, default=40, help="Number of synthetic students")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--first-roll", type=int, default=101, help="Roll number of the first student")
    args = parser.parse_args(list(argv) if argv is not None else None)

    generate_synthetic_roster(args.output, n_students=args.students, seed=args.seed, first_roll=args.first_roll)
    print(f"Synthetic roster written to {args.output}")


if __name__ == "__main__":
    main()
