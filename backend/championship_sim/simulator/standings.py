"""
League and group standings.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..core.football import Phase
from .exceptions import InvalidInputError, MissingReferenceError
from .models import Championship, ChampionshipSettings, GroupStandings, Match, StandingEntry, Team
from .tiebreakers import rank_alphabetically, rank_entries, unresolved_ties


logger = logging.getLogger(__name__)


def calculate_standings(
    teams: Sequence[Team],
    matches: Sequence[Match],
    settings: Optional[ChampionshipSettings] = None,
    group: Optional[str] = None
) -> List[StandingEntry]:
    """
    Aggregate finished matches into a ranked table.

    Args:
        teams: Teams that appear in the table
        matches: Matches to read results from; unfinished ones are ignored
        settings: Points per win and draw
        group: Only count matches tagged with this group, and tag the rows

    Returns:
        Table rows, best first

    Raises:
        MissingReferenceError: If a finished match involves a team not in ``teams``
    """
    settings = settings or ChampionshipSettings()

    table: Dict[str, StandingEntry] = {
        team.id: StandingEntry(team_id=team.id, team_name=team.name, group=group)
        for team in teams
    }

    finished = [
        m for m in matches
        if m.is_finished and (group is None or m.group == group)
    ]

    for match in finished:
        home = table.get(match.home_team_id)
        away = table.get(match.away_team_id)
        if home is None or away is None:
            missing = match.home_team_id if home is None else match.away_team_id
            raise MissingReferenceError(f"Match {match.id} references unknown team {missing}")

        home.played += 1
        away.played += 1
        home.goals_for += match.home_score
        home.goals_against += match.away_score
        away.goals_for += match.away_score
        away.goals_against += match.home_score

        if match.home_score > match.away_score:
            home.points += settings.points_win
            home.wins += 1
            away.losses += 1
        elif match.home_score < match.away_score:
            away.points += settings.points_win
            away.wins += 1
            home.losses += 1
        else:
            home.points += settings.points_draw
            away.points += settings.points_draw
            home.draws += 1
            away.draws += 1

    entries = list(table.values())
    for entry in entries:
        entry.goal_difference = entry.goals_for - entry.goals_against

    if not finished:
        return rank_alphabetically(entries)

    ranked = rank_entries(entries)
    for tie in unresolved_ties(ranked):
        logger.debug(
            "Unresolved tie%s between %s; keeping team order",
            f" in {group}" if group else "",
            ", ".join(e.team_id for e in tie)
        )
    return ranked


def calculate_group_standings(championship: Championship, matches: Sequence[Match]) -> GroupStandings:
    """
    One ranked table per group, in the championship's group order.

    Only group-stage matches tagged with the group are counted.

    Raises:
        InvalidInputError: If the championship has no groups
        MissingReferenceError: If a group lists a team that is not in the championship,
            or a group-stage match is not tagged with one of its groups
    """
    if not championship.groups:
        raise InvalidInputError(f"Championship {championship.id} has no groups")

    teams_by_id = championship.team_by_id()
    group_ids = {group.id for group in championship.groups}
    group_matches = [m for m in matches if m.phase == Phase.GROUPS]

    for match in group_matches:
        if match.group not in group_ids:
            raise MissingReferenceError(f"Match {match.id} references unknown group {match.group}")

    tables: GroupStandings = []

    for group in championship.groups:
        group_teams = []
        for team_id in group.team_ids:
            team = teams_by_id.get(team_id)
            if team is None:
                raise MissingReferenceError(f"Group {group.name} references unknown team {team_id}")
            group_teams.append(team)

        tables.append(calculate_standings(group_teams, group_matches, championship.settings, group=group.id))

    logger.debug("Calculated standings for %d groups", len(tables))
    return tables
