from typing import Dict, Iterable, List, Optional

from .models import MAX_MARK, MIN_MARK, SUBJECTS, Student
from .selection import MAX_COMPARISON, SelectionState


def check_unique_ids(roster: Iterable[Student]) -> int:
    ids = [student.id for student in roster]
    return len(ids) - len(set(ids))


def check_unique_roll_numbers(roster: Iterable[Student]) -> int:
    rolls = [student.roll_no for student in roster]
    return len(rolls) - len(set(rolls))


def check_mark_ranges(roster: Iterable[Student]) -> int:
    invalid = 0
    for student in roster:
        for subject in SUBJECTS:
            mark = student.marks.get(subject)
            if not isinstance(mark, int) or isinstance(mark, bool) or not MIN_MARK <= mark <= MAX_MARK:
                invalid += 1
    return invalid


def check_selection(roster: Iterable[Student], selection: SelectionState) -> int:
    """Count selection references that break the slot rules."""
    ids = {student.id for student in roster}
    problems = sum(1 for sid in selection.comparison if sid not in ids)
    problems += max(0, len(selection.comparison) - MAX_COMPARISON)
    problems += len(selection.comparison) - len(set(selection.comparison))
    if selection.focused is not None and selection.focused not in ids:
        problems += 1
    if selection.comparison_open and len(selection.comparison) != MAX_COMPARISON:
        problems += 1
    return problems


def run_invariants(roster: List[Student], selection: Optional[SelectionState] = None) -> List[Dict[str, object]]:
    results = []

    duplicate_ids = check_unique_ids(roster)
    results.append({"name": "unique_ids", "ok": duplicate_ids == 0, "detail": duplicate_ids})

    duplicate_rolls = check_unique_roll_numbers(roster)
    results.append({"name": "unique_roll_numbers", "ok": duplicate_rolls == 0, "detail": duplicate_rolls})

    bad_marks = check_mark_ranges(roster)
    results.append({"name": "mark_range_violations", "ok": bad_marks == 0, "detail": bad_marks})

    if selection is not None:
        stale = check_selection(roster, selection)
        results.append({"name": "selection_consistency", "ok": stale == 0, "detail": stale})

    return results
