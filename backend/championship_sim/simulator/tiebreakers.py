"""
Ranking rules for league and group tables.

Tiebreaker order:
1. Points
2. Goal difference
3. Goals scored

Teams level on all three keep their input order. Before any match is
finished the table is listed alphabetically instead.
"""

import unicodedata
from typing import List, Sequence, Tuple

from .models import StandingEntry


def standings_sort_key(entry: StandingEntry) -> Tuple[int, int, int]:
    return (-entry.points, -entry.goal_difference, -entry.goals_for)


def name_sort_key(name: str) -> str:
    """Accent- and case-insensitive collation key, so "Ávila" sorts with "Avila"."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def rank_entries(entries: Sequence[StandingEntry]) -> List[StandingEntry]:
    """Sort table rows best first. The sort is stable."""
    return sorted(entries, key=standings_sort_key)


def rank_alphabetically(entries: Sequence[StandingEntry]) -> List[StandingEntry]:
    return sorted(entries, key=lambda e: name_sort_key(e.team_name))


def is_tied(first: StandingEntry, second: StandingEntry) -> bool:
    """True when no tiebreaker separates the two rows."""
    return standings_sort_key(first) == standings_sort_key(second)


def unresolved_ties(entries: Sequence[StandingEntry]) -> List[List[StandingEntry]]:
    """
    Groups of adjacent rows that no tiebreaker separates.

    Args:
        entries: Ranked table rows

    Returns:
        Lists of two or more tied rows, in table order
    """
    ties: List[List[StandingEntry]] = []
    current: List[StandingEntry] = []

    for entry in entries:
        if current and is_tied(current[-1], entry):
            current.append(entry)
            continue
        if len(current) > 1:
            ties.append(current)
        current = [entry]

    if len(current) > 1:
        ties.append(current)
    return ties
