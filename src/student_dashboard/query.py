import unicodedata
from typing import Iterable, List

from .metrics import STRENGTH_THRESHOLD, WEAKNESS_THRESHOLD
from .models import RankedStudent

CATEGORIES = ["all", "top", "below"]
SORT_KEYS = ["rank", "name", "roll"]


def _text_key(value: str):
    # Accents and case are ignored first ("Émile" files under E); raw text breaks ties.
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), value)


def search_students(ranked: Iterable[RankedStudent], term: str) -> List[RankedStudent]:
    needle = (term or "").strip().casefold()
    students = list(ranked)
    if not needle:
        return students
    return [s for s in students if needle in s.name.casefold() or needle in s.roll_no.casefold()]


def filter_category(ranked: Iterable[RankedStudent], category: str = "all") -> List[RankedStudent]:
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category filter '{category}'")
    students = list(ranked)
    if category == "top":
        return [s for s in students if s.average >= STRENGTH_THRESHOLD]
    if category == "below":
        return [s for s in students if s.average < WEAKNESS_THRESHOLD]
    return students


def sort_students(ranked: Iterable[RankedStudent], sort: str = "rank") -> List[RankedStudent]:
    """Reorder for display only; ranks keep their global values."""

    if sort not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{sort}'")
    students = list(ranked)
    if sort == "name":
        return sorted(students, key=lambda s: _text_key(s.name))
    if sort == "roll":
        return sorted(students, key=lambda s: _text_key(s.roll_no))
    return students


def apply_query(
    ranked: Iterable[RankedStudent],
    search: str = "",
    category: str = "all",
    sort: str = "rank",
) -> List[RankedStudent]:
    """Search, then category filter, then sort the ranked roster."""

    view = search_students(ranked, search)
    view = filter_category(view, category)
    return sort_students(view, sort)
