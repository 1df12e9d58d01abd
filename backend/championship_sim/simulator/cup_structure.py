"""
Cup structure calculation.

Decides how many groups a cup has, how teams are spread across them, how
many qualify from each group and which knockout phase the qualifiers enter.
"""

import logging
import math
import string
from typing import List, Optional, Sequence, Tuple

from ..core.football import KNOCKOUT_STAGE_SIZES, phase_for_stage
from .exceptions import BelowMinimumTeamsError, InvalidInputError
from .fixtures import ensure_unique_ids
from .models import CupConfig, CupStructure, Group, Team


logger = logging.getLogger(__name__)

# Team count -> (groups, teams per group) for common cup sizes
FIXED_LAYOUTS = {
    12: (2, 6),
    16: (4, 4),
    24: (6, 4),
    32: (8, 4),
}

MAX_GROUPS = 16
MAX_BRACKET_SIZE = max(KNOCKOUT_STAGE_SIZES)


def is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


def choose_group_layout(total_teams: int, config: CupConfig) -> Tuple[int, int]:
    """
    Pick the group count and (largest) group size.

    Common sizes use a fixed layout when it fits the bounds. Otherwise every
    group count is tried and the one leaving the fewest empty slots wins,
    as long as no group ends up outside [min, max] teams.
    """
    if total_teams in FIXED_LAYOUTS:
        groups, size = FIXED_LAYOUTS[total_teams]
        if config.min_teams_per_group <= size <= config.max_teams_per_group:
            return groups, size

    best: Optional[Tuple[int, int]] = None
    best_diff = math.inf

    for groups in range(1, min(MAX_GROUPS, total_teams) + 1):
        largest = math.ceil(total_teams / groups)
        smallest = total_teams // groups
        if smallest < config.min_teams_per_group or largest > config.max_teams_per_group:
            continue
        diff = largest * groups - total_teams
        if diff < best_diff:
            best_diff = diff
            best = (groups, largest)

    if best is not None:
        return best

    if total_teams <= config.max_teams_per_group:
        return 1, total_teams

    groups = min(math.ceil(total_teams / config.max_teams_per_group), MAX_GROUPS)
    logger.warning(
        "No group layout fits %d teams within %d-%d per group; using %d groups",
        total_teams, config.min_teams_per_group, config.max_teams_per_group, groups
    )
    return groups, math.ceil(total_teams / groups)


def group_name(index: int) -> str:
    if index < len(string.ascii_uppercase):
        return string.ascii_uppercase[index]
    return f"Group {index + 1}"


def distribute_teams(teams: Sequence[Team], group_count: int) -> List[Group]:
    """
    Deal teams into groups, strongest first.

    Teams are ordered by average player overall and dealt in turn, so each
    group gets a similar spread of strength.
    """
    groups = []
    for i in range(group_count):
        name = group_name(i)
        groups.append(Group(id=f"group-{name.replace(' ', '-')}", name=name))

    ranked = sorted(teams, key=lambda t: t.average_overall, reverse=True)
    for i, team in enumerate(ranked):
        groups[i % group_count].team_ids.append(team.id)

    return groups


def decide_qualifiers(group_count: int, teams_per_group: int, smallest_group: int, requested: int) -> int:
    """
    Qualifiers per group.

    Starts from the requested number and adjusts it so that the knockout
    bracket is a power of two whenever the group sizes allow it.
    """
    qualified = max(1, min(requested, smallest_group))

    # Two large groups feed a quarterfinal
    if group_count == 2 and teams_per_group >= 6:
        qualified = max(qualified, min(4, smallest_group))

    if group_count == 1:
        qualified = max(qualified, min(2, smallest_group))

    if not is_power_of_two(group_count * qualified):
        for candidate in range(qualified + 1, smallest_group + 1):
            total = group_count * candidate
            if is_power_of_two(total) and total <= MAX_BRACKET_SIZE:
                qualified = candidate
                break

    while group_count * qualified > MAX_BRACKET_SIZE and qualified > 1:
        qualified -= 1

    return qualified


def initial_stage_for(total_qualified: int) -> int:
    """Smallest bracket size that holds every qualifier."""
    fitting = [size for size in KNOCKOUT_STAGE_SIZES if size >= total_qualified]
    return min(fitting) if fitting else MAX_BRACKET_SIZE


def structure_from_groups(groups: List[Group], config: CupConfig) -> CupStructure:
    """Build the knockout side of a cup structure around a fixed set of groups."""
    if not groups:
        raise InvalidInputError("A cup needs at least one group")

    sizes = [len(g.team_ids) for g in groups]
    teams_per_group = max(sizes)
    qualified = decide_qualifiers(len(groups), teams_per_group, min(sizes), config.qualified_per_group)
    total_qualified = len(groups) * qualified

    if total_qualified < 2:
        raise InvalidInputError("A cup needs at least two qualifiers for the knockout stage")

    initial_stage = initial_stage_for(total_qualified)

    return CupStructure(
        groups=groups,
        group_count=len(groups),
        teams_per_group=teams_per_group,
        qualified_per_group=qualified,
        total_qualified=total_qualified,
        initial_knockout_stage=initial_stage,
        initial_knockout_phase=phase_for_stage(initial_stage),
        knockout_stages=[size for size in KNOCKOUT_STAGE_SIZES if size <= initial_stage],
        config=config
    )


def calculate_cup_structure(teams: Sequence[Team], config: Optional[CupConfig] = None) -> CupStructure:
    """
    Calculate the group and knockout structure of a cup.

    Args:
        teams: Participating teams
        config: Group size bounds and requested qualifiers per group

    Returns:
        CupStructure with populated groups

    Raises:
        BelowMinimumTeamsError: If there are fewer teams than the minimum group size
    """
    config = config or CupConfig()
    total_teams = len(teams)

    if config.min_teams_per_group > config.max_teams_per_group:
        raise InvalidInputError("min_teams_per_group cannot exceed max_teams_per_group")
    if total_teams < config.min_teams_per_group:
        raise BelowMinimumTeamsError(total_teams, config.min_teams_per_group)
    ensure_unique_ids(teams)

    group_count, _ = choose_group_layout(total_teams, config)
    groups = distribute_teams(teams, group_count)
    structure = structure_from_groups(groups, config)

    logger.info(
        "Cup structure: %d teams, %d groups of up to %d, %d qualify each (%d total), knockout starts at %s",
        total_teams, structure.group_count, structure.teams_per_group,
        structure.qualified_per_group, structure.total_qualified,
        structure.initial_knockout_phase.value
    )
    return structure
