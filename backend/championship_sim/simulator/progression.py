"""
Competition progression.

Simulates scheduled matches phase by phase, seeds group qualifiers into the
knockout bracket and moves knockout winners (and semifinal losers) along
the bracket graph.

Every function returns a new match list; the caller's list and matches are
left untouched. Progression requested before its feeding results exist is
a no-op rather than an error, so every step can be safely re-run.
"""

import logging
import random
from typing import Dict, List, Optional, Sequence

from ..core.football import (
    KNOCKOUT_PHASES,
    PHASE_ORDER,
    BracketPath,
    ChampionshipType,
    MatchStatus,
    Phase,
    following_phase,
    is_knockout_phase,
)
from .bracket import BracketGraph
from .config import DEFAULT_CONFIG, SimulationConfig
from .cup_structure import structure_from_groups
from .engine import simulate_match, simulate_penalty_shootout
from .exceptions import InvalidInputError, MissingReferenceError
from .models import Championship, CupConfig, Group, GroupStandings, Match, Team
from .standings import calculate_group_standings, calculate_standings
from .tiebreakers import rank_entries


logger = logging.getLogger(__name__)


def copy_matches(matches: Sequence[Match]) -> List[Match]:
    return [m.copy() for m in matches]


# ============== Phase state ==============

def is_phase_completed(matches: Sequence[Match], phase: Phase) -> bool:
    """
    A phase is complete when it has matches and every one of them is finished.

    Byes are never played and do not count.
    """
    phase_matches = [m for m in matches if m.phase == phase and not m.is_bye]
    return bool(phase_matches) and all(m.is_finished for m in phase_matches)


def phases_in(matches: Sequence[Match]) -> List[Phase]:
    """Phases that have at least one match, in play order."""
    present = {m.phase for m in matches}
    return [phase for phase in PHASE_ORDER if phase in present]


def first_knockout_phase(matches: Sequence[Match]) -> Optional[Phase]:
    present = {m.phase for m in matches}
    return next((phase for phase in KNOCKOUT_PHASES if phase in present), None)


def next_phase(matches: Sequence[Match], phase: Phase) -> Optional[Phase]:
    """
    The bracket phase fed by ``phase`` in this fixture.

    The group stage feeds the first knockout phase; semifinals feed the
    final (the third-place match is played alongside it).
    """
    if phase == Phase.GROUPS:
        return first_knockout_phase(matches)
    present = {m.phase for m in matches}
    candidate = following_phase(phase)
    while candidate is not None and candidate not in present:
        candidate = following_phase(candidate)
    return candidate


# ============== Results ==============

def winner_of(match: Match) -> Optional[str]:
    """Team that advances from a knockout match, or None if undecided."""
    if match.is_bye:
        return match.home_team_id
    if not match.is_finished or not match.has_teams:
        return None

    if match.home_score != match.away_score:
        home_won = match.home_score > match.away_score
    elif match.penalty_score and match.penalty_score.home != match.penalty_score.away:
        home_won = match.penalty_score.home > match.penalty_score.away
    else:
        return None

    return match.home_team_id if home_won else match.away_team_id


def loser_of(match: Match) -> Optional[str]:
    winner = winner_of(match)
    if winner is None or match.is_bye:
        return None
    return match.away_team_id if winner == match.home_team_id else match.home_team_id


def needs_shootout(match: Match) -> bool:
    """A finished knockout draw without a decisive penalty score."""
    if not (match.is_finished and is_knockout_phase(match.phase) and match.has_teams):
        return False
    if not match.is_draw:
        return False
    return match.penalty_score is None or match.penalty_score.home == match.penalty_score.away


def _lookup_team(teams_by_id: Dict[str, Team], team_id: str, match: Match) -> Team:
    team = teams_by_id.get(team_id)
    if team is None:
        raise MissingReferenceError(f"Match {match.id} references unknown team {team_id}")
    return team


def play_match(
    match: Match,
    teams_by_id: Dict[str, Team],
    config: Optional[SimulationConfig] = None,
    rng=None
) -> Match:
    """
    Simulate one scheduled match and return the finished copy.

    Knockout draws are settled with a penalty shootout.

    Raises:
        MissingReferenceError: If either team is not in ``teams_by_id``
    """
    config = config or DEFAULT_CONFIG
    rng = rng or random

    home = _lookup_team(teams_by_id, match.home_team_id, match)
    away = _lookup_team(teams_by_id, match.away_team_id, match)
    result = simulate_match(home, away, match.round, config, rng)

    played = match.copy()
    played.home_score = result.home_score
    played.away_score = result.away_score
    played.events = result.events
    played.status = MatchStatus.FINISHED
    played.penalty_score = None

    if needs_shootout(played):
        played.penalty_score = simulate_penalty_shootout(config, rng)
        logger.info(
            "Match %s drawn %d-%d, decided on penalties %d-%d",
            played.id, played.home_score, played.away_score,
            played.penalty_score.home, played.penalty_score.away
        )

    return played


def _play_all(
    championship: Championship,
    matches: List[Match],
    selected: Sequence[Match],
    config: Optional[SimulationConfig],
    rng
) -> List[Match]:
    teams_by_id = championship.team_by_id()
    selected_ids = {m.id for m in selected}
    return [
        play_match(m, teams_by_id, config, rng) if m.id in selected_ids else m
        for m in matches
    ]


# ============== Simulation ==============

def simulate_round(
    championship: Championship,
    matches: Sequence[Match],
    round_number: int,
    config: Optional[SimulationConfig] = None,
    rng=None
) -> List[Match]:
    """Simulate every scheduled match of a league round."""
    updated = copy_matches(matches)
    pending = [
        m for m in updated
        if m.round == round_number and m.status == MatchStatus.SCHEDULED and m.has_teams
    ]
    if not pending:
        logger.info("No scheduled matches in round %d", round_number)
        return updated

    logger.info("Simulating round %d (%d matches)", round_number, len(pending))
    return _play_all(championship, updated, pending, config, rng)


def simulate_copa_phase(
    championship: Championship,
    matches: Sequence[Match],
    phase: Phase,
    config: Optional[SimulationConfig] = None,
    rng=None
) -> List[Match]:
    """
    Simulate the next batch of a cup phase.

    Group stage: the lowest round that still has scheduled matches.
    Knockout phases: every scheduled match whose two teams are known.

    Args:
        championship: Competition with its teams
        matches: Current match list
        phase: Phase to simulate
        config: Simulation options
        rng: Random source

    Returns:
        New match list with the simulated matches finished
    """
    updated = copy_matches(matches)

    if phase == Phase.GROUPS:
        scheduled = [m for m in updated if m.phase == Phase.GROUPS and m.status == MatchStatus.SCHEDULED]
        if not scheduled:
            logger.info("No scheduled group matches left")
            return updated

        next_round = min(m.round for m in scheduled)
        pending = [m for m in scheduled if m.round == next_round]
        logger.info("Simulating group round %d (%d matches)", next_round, len(pending))
        return _play_all(championship, updated, pending, config, rng)

    pending = [
        m for m in updated
        if m.phase == phase and m.status == MatchStatus.SCHEDULED and not m.is_bye and m.has_teams
    ]
    waiting = [
        m for m in updated
        if m.phase == phase and m.status == MatchStatus.SCHEDULED and not m.is_bye and not m.has_teams
    ]
    if waiting:
        logger.info("%d %s match(es) still waiting for teams", len(waiting), phase.value)

    logger.info("Simulating %s (%d matches)", phase.value, len(pending))
    return _play_all(championship, updated, pending, config, rng)


# ============== Knockout seeding ==============

def _qualifiers_by_group(
    standings: GroupStandings,
    groups: Sequence[Group],
    qualified_per_group: int
) -> Dict[str, List[str]]:
    entries_by_group: Dict[str, list] = {}
    for table in standings:
        for entry in table:
            entries_by_group.setdefault(entry.group, []).append(entry)

    qualified = {}
    for group in groups:
        entries = entries_by_group.get(group.id)
        if not entries:
            raise MissingReferenceError(f"No standings for group {group.name} ({group.id})")
        qualified[group.id] = [e.team_id for e in rank_entries(entries)[:qualified_per_group]]
        logger.info("Group %s qualifiers: %s", group.name, ", ".join(qualified[group.id]))
    return qualified


def _cross_group_pairings(qualified: Dict[str, List[str]], groups: Sequence[Group]) -> List[tuple]:
    """Two groups of four qualifiers: 1A-4B, 2A-3B, 3A-2B, 4A-1B."""
    group_a = qualified[groups[0].id]
    group_b = qualified[groups[1].id]
    return [(group_a[i], group_b[3 - i]) for i in range(4)]


def _sequential_pairings(qualified: Dict[str, List[str]], groups: Sequence[Group], slots: int) -> List[tuple]:
    """
    Flatten qualifiers group by group and fill matches two at a time.

    When there are fewer than two teams per match, the trailing matches get
    a single team and become byes.
    """
    flat = [team_id for group in groups for team_id in qualified[group.id]]
    doubles = max(0, min(slots, len(flat) - slots))

    if len(flat) > 2 * slots:
        logger.warning("%d qualifiers do not fit in %d matches; dropping the rest", len(flat), slots)

    pairings = []
    position = 0
    for i in range(slots):
        if i < doubles:
            pairings.append((flat[position], flat[position + 1]))
            position += 2
        elif position < len(flat):
            pairings.append((flat[position], None))
            position += 1
        else:
            pairings.append((None, None))
    return pairings


def update_knockout_teams(
    matches: Sequence[Match],
    standings: GroupStandings,
    groups: Sequence[Group],
    qualified_per_group: int
) -> List[Match]:
    """
    Place group qualifiers into the first knockout phase.

    Slots that already hold a team are left alone, so re-running after a
    partial update only fills what is missing.

    Args:
        matches: Current match list
        standings: Per-group tables (as returned by calculate_group_standings)
        groups: Groups in draw order
        qualified_per_group: How many teams advance from each group

    Returns:
        New match list with the first knockout phase seeded
    """
    updated = copy_matches(matches)
    phase = first_knockout_phase(updated)
    if phase is None:
        logger.info("No knockout phase found")
        return updated

    qualified = _qualifiers_by_group(standings, groups, qualified_per_group)
    first_matches = [m for m in updated if m.phase == phase]

    if len(groups) == 2 and qualified_per_group == 4 and len(first_matches) >= 4:
        pairings = _cross_group_pairings(qualified, groups)
    else:
        pairings = _sequential_pairings(qualified, groups, len(first_matches))

    for match, (home, away) in zip(first_matches, pairings):
        if match.home_team_id is None:
            match.home_team_id = home
        if match.away_team_id is None:
            match.away_team_id = away
        if match.home_team_id is not None and match.away_team_id is None and match.status == MatchStatus.SCHEDULED:
            match.is_bye = True
        logger.debug("Seeded %s: %s vs %s", match.id, match.home_team_id, match.away_team_id or "bye")

    return _propagate(updated, config=None, rng=None, byes_only=True)


# ============== Bracket advancement ==============

def _place(target: Match, slot: BracketPath, team_id: str, source: Match) -> None:
    current = target.home_team_id if slot == BracketPath.HOME else target.away_team_id
    if current == team_id:
        return
    if current is not None:
        logger.warning(
            "Match %s %s slot already holds %s; not replacing with %s from %s",
            target.id, slot.value, current, team_id, source.id
        )
        return
    if slot == BracketPath.HOME:
        target.home_team_id = team_id
    else:
        target.away_team_id = team_id
    logger.info("%s advances from %s to %s as %s", team_id, source.id, target.id, slot.value)


def _propagate(
    matches: List[Match],
    config: Optional[SimulationConfig],
    rng,
    byes_only: bool = False
) -> List[Match]:
    by_id = {m.id: m for m in matches}
    graph = BracketGraph.from_matches(matches)

    if not byes_only:
        for match in matches:
            if needs_shootout(match):
                match.penalty_score = simulate_penalty_shootout(config, rng)
                logger.info("Resolved drawn match %s on penalties", match.id)

    ordered = sorted(matches, key=lambda m: PHASE_ORDER.index(m.phase))
    for match in ordered:
        link = graph.link(match.id)
        if link is None or (byes_only and not match.is_bye):
            continue
        winner = winner_of(match)
        if winner is None:
            continue
        _place(by_id[link.next_match_id], link.path, winner, match)

    if not byes_only and graph.third_place_match_id and len(graph.semifinal_ids) == 2:
        semis = [by_id[match_id] for match_id in graph.semifinal_ids]
        losers = [loser_of(m) for m in semis]
        if all(m.is_finished for m in semis) and all(losers):
            third = by_id[graph.third_place_match_id]
            _place(third, BracketPath.HOME, losers[0], semis[0])
            _place(third, BracketPath.AWAY, losers[1], semis[1])

    return matches


def advance_bracket(
    matches: Sequence[Match],
    config: Optional[SimulationConfig] = None,
    rng=None
) -> List[Match]:
    """
    Move every decided knockout result along the bracket.

    Finished knockout draws without a decisive penalty score are settled by
    a shootout first. Semifinal losers fill the third-place match once both
    semifinals are finished.
    """
    return _propagate(copy_matches(matches), config or DEFAULT_CONFIG, rng or random)


def qualified_per_group_for(championship: Championship) -> int:
    """Qualifiers per group as decided when the cup was drawn."""
    structure = structure_from_groups(championship.groups, CupConfig.from_settings(championship.settings))
    return structure.qualified_per_group


def prepare_next_phase(
    championship: Championship,
    matches: Sequence[Match],
    current_phase: Phase,
    next_phase: Phase,
    config: Optional[SimulationConfig] = None,
    rng=None
) -> List[Match]:
    """
    Fill the teams of ``next_phase`` from the results of ``current_phase``.

    After the group stage the qualifiers are seeded into the first knockout
    phase; after a knockout phase winners move along the bracket and the
    semifinal losers meet in the third-place match.

    Returns the (copied) match list unchanged when ``current_phase`` has not
    produced the needed results yet.
    """
    logger.info("Preparing transition from %s to %s", current_phase.value, next_phase.value)

    if current_phase == Phase.GROUPS:
        if not is_knockout_phase(next_phase):
            raise InvalidInputError("The group stage can only feed a knockout phase")
        if not is_phase_completed(matches, Phase.GROUPS):
            logger.info("Group stage not finished; nothing to prepare")
            return copy_matches(matches)

        standings = calculate_group_standings(championship, matches)
        seeded = update_knockout_teams(
            matches, standings, championship.groups, qualified_per_group_for(championship)
        )
        return advance_bracket(seeded, config, rng)

    return advance_bracket(matches, config, rng)


# ============== Whole competitions ==============

def simulate_championship(
    championship: Championship,
    matches: Sequence[Match],
    config: Optional[SimulationConfig] = None,
    rng=None
) -> List[Match]:
    """
    Play a generated fixture to the end.

    Leagues are played round by round. Cups play the group stage round by
    round, seed the bracket, then play each knockout phase in turn.
    """
    config = config or DEFAULT_CONFIG
    rng = rng or random
    updated = copy_matches(matches)

    if championship.type == ChampionshipType.LEAGUE:
        for round_number in sorted({m.round for m in updated}):
            updated = simulate_round(championship, updated, round_number, config, rng)
        return updated

    if not championship.groups:
        raise InvalidInputError(f"Cup {championship.id} has no groups; generate the cup fixture first")

    while any(m.phase == Phase.GROUPS and m.status == MatchStatus.SCHEDULED for m in updated):
        updated = simulate_copa_phase(championship, updated, Phase.GROUPS, config, rng)

    knockout = [phase for phase in phases_in(updated) if is_knockout_phase(phase)]
    if knockout:
        updated = prepare_next_phase(championship, updated, Phase.GROUPS, knockout[0], config, rng)

    for phase in knockout:
        updated = simulate_copa_phase(championship, updated, phase, config, rng)
        updated = advance_bracket(updated, config, rng)

    return updated


def get_champion(championship: Championship, matches: Sequence[Match]) -> Optional[str]:
    """Winner of the final for cups, table leader once every match is played for leagues."""
    if championship.type == ChampionshipType.CUP:
        final = next((m for m in matches if m.phase == Phase.FINAL), None)
        return winner_of(final) if final else None

    if not matches or not all(m.is_finished for m in matches):
        return None
    table = calculate_standings(championship.teams, matches, championship.settings)
    return table[0].team_id if table else None
