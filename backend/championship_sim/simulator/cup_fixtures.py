"""
Cup fixture generation: group-stage round-robins plus the knockout bracket.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.football import BracketPath, BracketSide, MatchStatus, Phase, phases_from
from .bracket import BracketGraph
from .cup_structure import calculate_cup_structure, structure_from_groups
from .exceptions import InvalidInputError, MissingReferenceError
from .fixtures import ensure_unique_ids, round_robin_rounds, scheduled_match
from .models import BracketLink, CupConfig, CupStructure, Group, Match, Team


logger = logging.getLogger(__name__)

THIRD_PLACE_MATCH_ID = "ko-third-1"


@dataclass
class CupFixture:
    """Everything created when a cup is drawn."""

    matches: List[Match]
    groups: List[Group]
    structure: CupStructure
    bracket: BracketGraph

    def to_dict(self) -> dict:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "groups": [g.to_dict() for g in self.groups],
            "structure": self.structure.to_dict(),
            "bracket": self.bracket.to_dict()
        }


def validate_custom_groups(teams: Sequence[Team], groups: Sequence[Group]) -> None:
    """
    Check that user-defined groups only use known teams, each at most once.

    Raises:
        MissingReferenceError: If a group lists an unknown team
        InvalidInputError: If a team is listed twice or a group is empty
    """
    known = {team.id for team in teams}
    seen: Dict[str, str] = {}

    for group in groups:
        if not group.team_ids:
            raise InvalidInputError(f"Group {group.name} has no teams")
        for team_id in group.team_ids:
            if team_id not in known:
                raise MissingReferenceError(f"Group {group.name} references unknown team {team_id}")
            if team_id in seen:
                raise InvalidInputError(
                    f"Team {team_id} is in both group {seen[team_id]} and group {group.name}"
                )
            seen[team_id] = group.name


def generate_group_matches(groups: Sequence[Group]) -> List[Match]:
    """Single round-robin inside each group; odd groups get a bye each round."""
    matches: List[Match] = []
    counter = 1

    for group in groups:
        entries: List[Optional[str]] = list(group.team_ids)
        if len(entries) % 2 != 0:
            entries.append(None)

        for round_number, pairings in enumerate(round_robin_rounds(entries), start=1):
            for home, away in pairings:
                matches.append(scheduled_match(f"{group.id}-{counter}", home, away, round_number, group=group.id))
                counter += 1

    return matches


def generate_knockout_bracket(
    initial_stage: int,
    initial_phase: Phase,
    first_round: int,
    has_third_place: bool = True
) -> List[Match]:
    """
    Create the empty knockout matches and wire them together.

    Match j of a phase feeds match j // 2 of the next phase, taking the home
    slot when j is even and the away slot when j is odd, so all winners
    converge on a single final.

    Returns:
        Knockout matches with empty team slots, in phase order
    """
    phases = phases_from(initial_phase)
    matches: List[Match] = []
    round_number = first_round

    for i, phase in enumerate(phases):
        next_phase = phases[i + 1] if i + 1 < len(phases) else None
        matches_in_phase = (initial_stage >> i) // 2

        for j in range(matches_in_phase):
            side = None
            if matches_in_phase > 1:
                side = BracketSide.LEFT if j < matches_in_phase / 2 else BracketSide.RIGHT

            matches.append(Match(
                id=f"ko-{phase.value}-{j + 1}",
                home_team_id=None,
                away_team_id=None,
                round=round_number,
                phase=phase,
                status=MatchStatus.SCHEDULED,
                next_match_id=f"ko-{next_phase.value}-{j // 2 + 1}" if next_phase else None,
                path=(BracketPath.HOME if j % 2 == 0 else BracketPath.AWAY) if next_phase else None,
                bracket_side=side
            ))

        logger.debug("Knockout phase %s: %d matches, round %d", phase.value, matches_in_phase, round_number)
        round_number += 1

    if has_third_place and Phase.SEMIS in phases:
        matches.append(Match(
            id=THIRD_PLACE_MATCH_ID,
            home_team_id=None,
            away_team_id=None,
            round=round_number - 1,  # same round as the final
            phase=Phase.THIRD,
            status=MatchStatus.SCHEDULED
        ))

    return matches


def build_bracket_graph(knockout_matches: Sequence[Match]) -> BracketGraph:
    links = {
        m.id: BracketLink(match_id=m.id, next_match_id=m.next_match_id, path=m.path)
        for m in knockout_matches
        if m.next_match_id is not None
    }
    third_place = next((m.id for m in knockout_matches if m.phase == Phase.THIRD), None)
    semifinals = [m.id for m in knockout_matches if m.phase == Phase.SEMIS]
    return BracketGraph(links, third_place, semifinals)


def generate_cup_fixture(
    teams: Sequence[Team],
    has_third_place: bool = True,
    config: Optional[CupConfig] = None,
    custom_groups: Optional[Sequence[Group]] = None
) -> CupFixture:
    """
    Draw a cup: groups, group-stage matches and the knockout bracket.

    Args:
        teams: Participating teams
        has_third_place: Add a third-place match fed by the semifinal losers
        config: Group size bounds and requested qualifiers per group
        custom_groups: Predefined groups to use instead of automatic ones

    Returns:
        CupFixture with matches, groups, structure and bracket graph
    """
    config = config or CupConfig()

    if custom_groups:
        ensure_unique_ids(teams)
        validate_custom_groups(teams, custom_groups)
        structure = structure_from_groups([g.copy() for g in custom_groups], config)
    else:
        structure = calculate_cup_structure(teams, config)

    group_matches = generate_group_matches(structure.groups)
    last_group_round = max((m.round for m in group_matches), default=0)

    knockout_matches = generate_knockout_bracket(
        structure.initial_knockout_stage,
        structure.initial_knockout_phase,
        last_group_round + 1,
        has_third_place
    )

    logger.info(
        "Generated cup fixture: %d group matches, %d knockout matches starting at %s",
        len(group_matches), len(knockout_matches), structure.initial_knockout_phase.value
    )

    return CupFixture(
        matches=group_matches + knockout_matches,
        groups=structure.groups,
        structure=structure,
        bracket=build_bracket_graph(knockout_matches)
    )
