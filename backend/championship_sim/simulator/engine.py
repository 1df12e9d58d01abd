"""
Match simulation engine.

Scores are drawn from team sector strength plus controlled randomness;
goal events are attributed to starters weighted by their overall.
"""

import logging
import random
from typing import List, Optional

from ..core.football import ATTACKING_POSITIONS, CREATIVE_MIDFIELD_POSITIONS, DEFENSIVE_POSITIONS
from .config import DEFAULT_CONFIG, SimulationConfig
from .models import MatchEvent, MatchResult, PenaltyScore, Player, Team
from .sectors import calculate_team_sectors


logger = logging.getLogger(__name__)

MATCH_MINUTES = 90

# Blend weights for effective attack and defense
ATTACK_WEIGHT = 0.7
MIDFIELD_SUPPORT_WEIGHT = 0.3
DEFENSE_WEIGHT = 0.8
GOALKEEPING_SUPPORT_WEIGHT = 0.2


def goals_for_strength(strength: float, config: SimulationConfig, rng=random) -> int:
    """Map a final attacking strength to a goal count."""
    if strength > config.max_goal_base:
        upper = config.goals_above_max
    elif strength > config.mid_goal_base:
        upper = config.goals_above_mid
    elif strength > config.min_goal_base:
        upper = config.goals_above_min
    else:
        upper = config.goals_otherwise
    return rng.randint(0, upper)


def calculate_goals(
    attack_power: float,
    defense_power: float,
    trend: float,
    config: Optional[SimulationConfig] = None,
    rng=None
) -> int:
    """
    Draw the number of goals one side scores.

    Args:
        attack_power: Effective attack of the scoring side
        defense_power: Effective defense of the opponent
        trend: Scoring side's form, -1 to 1
        config: Simulation options
        rng: Random source (defaults to the ``random`` module)

    Returns:
        Goal count
    """
    config = config or DEFAULT_CONFIG
    rng = rng or random

    efficiency = (attack_power / max(defense_power, 1.0)) * (1 + trend * config.trend_impact)
    luck = rng.uniform(1 - config.randomness, 1 + config.randomness)

    return goals_for_strength(efficiency * luck, config, rng)


def pick_scorer(team: Team, rng=None) -> Optional[Player]:
    """
    Choose who scored a goal.

    Forwards and wingers first, then attacking and central midfielders,
    then any non-defensive starter, then any starter. Higher-rated players
    are proportionally more likely to be picked.
    """
    rng = rng or random
    starters = team.starters

    pool = [p for p in starters if p.position in ATTACKING_POSITIONS]
    if not pool:
        pool = [p for p in starters if p.position in CREATIVE_MIDFIELD_POSITIONS]
    if not pool:
        pool = [p for p in starters if p.position not in DEFENSIVE_POSITIONS]
    if not pool:
        pool = starters
    if not pool:
        return None

    weights = [max(p.overall, 0) for p in pool]
    if sum(weights) <= 0:
        return rng.choice(pool)
    return rng.choices(pool, weights=weights, k=1)[0]


def generate_match_events(
    home: Team,
    away: Team,
    home_score: int,
    away_score: int,
    rng=None
) -> List[MatchEvent]:
    """Create one goal event per goal, sorted by minute."""
    rng = rng or random
    events: List[MatchEvent] = []

    for team, score in ((home, home_score), (away, away_score)):
        if not team.players:
            if score:
                logger.warning("Team %s has no players; skipping %d goal event(s)", team.id, score)
            continue

        for _ in range(score):
            scorer = pick_scorer(team, rng)
            if scorer is None:
                logger.warning("Team %s has no starters; skipping goal event", team.id)
                continue
            events.append(MatchEvent(
                minute=rng.randint(1, MATCH_MINUTES),
                player_id=scorer.id,
                team_id=team.id,
                player_name=scorer.name
            ))

    # Stable sort keeps home goals ahead of away goals within the same minute
    return sorted(events, key=lambda e: e.minute)


def simulate_match(
    home: Team,
    away: Team,
    round_number: int,
    config: Optional[SimulationConfig] = None,
    rng=None
) -> MatchResult:
    """
    Simulate a single match.

    Home advantage and the home side's head-to-head bias only boost the
    home team; the away score is computed symmetrically without them.

    Args:
        home: Home team
        away: Away team
        round_number: Round the match belongs to
        config: Simulation options (defaults to DEFAULT_CONFIG)
        rng: Random source; pass ``random.Random(seed)`` for reproducible results

    Returns:
        Finished MatchResult with score and goal events
    """
    config = config or DEFAULT_CONFIG
    rng = rng or random

    home_sectors = calculate_team_sectors(home, config)
    away_sectors = calculate_team_sectors(away, config)

    home_attack = home_sectors.attack * config.home_advantage
    home_midfield = home_sectors.midfield * config.home_advantage

    bias = home.metadata.head_to_head_bias.get(away.id)
    if bias:
        home_attack *= bias

    home_score = calculate_goals(
        home_attack * ATTACK_WEIGHT + home_midfield * MIDFIELD_SUPPORT_WEIGHT,
        away_sectors.defense * DEFENSE_WEIGHT + away_sectors.goalkeeping * GOALKEEPING_SUPPORT_WEIGHT,
        home.metadata.trend,
        config,
        rng
    )

    away_score = calculate_goals(
        away_sectors.attack * ATTACK_WEIGHT + away_sectors.midfield * MIDFIELD_SUPPORT_WEIGHT,
        home_sectors.defense * DEFENSE_WEIGHT + home_sectors.goalkeeping * GOALKEEPING_SUPPORT_WEIGHT,
        away.metadata.trend,
        config,
        rng
    )

    events = generate_match_events(home, away, home_score, away_score, rng)

    logger.debug("Simulated %s %d-%d %s (round %d)", home.id, home_score, away_score, away.id, round_number)

    return MatchResult(
        home_score=home_score,
        away_score=away_score,
        round=round_number,
        events=events
    )


def simulate_penalty_shootout(config: Optional[SimulationConfig] = None, rng=None) -> PenaltyScore:
    """
    Decide a drawn knockout match on penalties.

    Both sides kick each round with independent success chances (home is
    slightly more accurate) until the tally differs. If still level after
    ``penalty_max_rounds`` rounds, a coin flip awards one extra goal.
    """
    config = config or DEFAULT_CONFIG
    rng = rng or random

    home = 0
    away = 0
    rounds = 0

    while home == away and rounds < config.penalty_max_rounds:
        rounds += 1
        if rng.random() < config.penalty_home_success:
            home += 1
        if rng.random() < config.penalty_away_success:
            away += 1

    if home == away:
        if rng.random() < 0.5:
            home += 1
        else:
            away += 1

    logger.debug("Penalty shootout %d-%d after %d round(s)", home, away, rounds)
    return PenaltyScore(home=home, away=away)
