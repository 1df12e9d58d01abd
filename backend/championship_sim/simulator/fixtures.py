"""
Round-robin fixture generation.

Uses the circle method: the first entry stays fixed and the others rotate
one position per round, pairing position i with position n-1-i.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..core.football import MatchStatus, Phase
from .exceptions import InvalidInputError, OddTeamCountError
from .models import Match, Team


logger = logging.getLogger(__name__)

Pairing = Tuple[str, str]


def round_robin_rounds(team_ids: Sequence[Optional[str]]) -> List[List[Pairing]]:
    """
    Generate a single round-robin.

    ``None`` entries are byes: pairings against them are left out, so an
    odd-sized pool padded with one ``None`` gives every team one rest round.

    Args:
        team_ids: Even-length list of team ids, possibly containing ``None``

    Returns:
        len(team_ids) - 1 rounds of (home, away) pairings
    """
    rotation = list(team_ids)
    n = len(rotation)
    rounds: List[List[Pairing]] = []

    for _ in range(n - 1):
        pairings = []
        for i in range(n // 2):
            home = rotation[i]
            away = rotation[n - 1 - i]
            if home is None or away is None:
                continue
            pairings.append((home, away))
        rounds.append(pairings)

        # Keep position 0 fixed, move the last entry to position 1
        rotation = [rotation[0]] + [rotation[-1]] + rotation[1:-1]

    return rounds


def ensure_unique_ids(teams: Sequence[Team]) -> None:
    seen = set()
    for team in teams:
        if team.id in seen:
            raise InvalidInputError(f"Team {team.id} appears more than once")
        seen.add(team.id)


def generate_league_fixture(teams: Sequence[Team], double_leg: bool = True) -> List[Match]:
    """
    Generate a league fixture.

    The second leg replays the first leg's pairings with home and away
    swapped, numbered as rounds N..2(N-1).

    Args:
        teams: Ordered team list (even length)
        double_leg: Set False for a single round-robin

    Returns:
        Scheduled matches, N(N-1) for a double round-robin

    Raises:
        OddTeamCountError: If the team count is odd
        InvalidInputError: If a team appears twice
    """
    if len(teams) % 2 != 0:
        raise OddTeamCountError(len(teams))
    ensure_unique_ids(teams)

    first_leg = round_robin_rounds([team.id for team in teams])
    rounds_per_leg = len(first_leg)

    matches: List[Match] = []
    for round_index, pairings in enumerate(first_leg, start=1):
        for i, (home, away) in enumerate(pairings):
            matches.append(scheduled_match(f"m-{round_index}-{i}", home, away, round_index))

    if double_leg:
        for round_index, pairings in enumerate(first_leg, start=rounds_per_leg + 1):
            for i, (home, away) in enumerate(pairings):
                matches.append(scheduled_match(f"m-{round_index}-{i}", away, home, round_index))

    logger.info(
        "Generated league fixture: %d teams, %d rounds, %d matches",
        len(teams), rounds_per_leg * (2 if double_leg else 1), len(matches)
    )
    return matches


def scheduled_match(match_id: str, home: str, away: str, round_number: int, group: Optional[str] = None) -> Match:
    return Match(
        id=match_id,
        home_team_id=home,
        away_team_id=away,
        round=round_number,
        phase=Phase.GROUPS,
        status=MatchStatus.SCHEDULED,
        group=group
    )
