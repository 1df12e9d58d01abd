"""
Sector rating calculations.

A team's goalkeeping, defense, midfield and attack ratings are the average
``overall`` of the starters playing in that sector, scaled by the team's
formation.
"""

import math
from typing import Dict, Optional, Tuple

from ..core.football import FORMATION_MODIFIERS, SECTOR_POSITIONS, Sector
from .config import DEFAULT_CONFIG, SimulationConfig
from .models import Team, TeamSectors


EMPTY_SECTOR_RATING = 50.0

# Sector weights for the single-number team overall
OVERALL_WEIGHTS = {
    Sector.ATTACK: 0.4,
    Sector.MIDFIELD: 0.3,
    Sector.DEFENSE: 0.2,
    Sector.GOALKEEPING: 0.1,
}


def apply_formation_modifier(base: float, modifier: float, formation_impact: float) -> float:
    """
    Scale a sector rating by a formation modifier.

    Only the modifier's distance from 1.0 is scaled by the impact factor,
    so a 1.10 modifier at impact 0.5 yields x1.05.
    """
    return base * (1 + (modifier - 1) * formation_impact)


def raw_sector_ratings(team: Team) -> Dict[Sector, float]:
    """Average overall of starters per sector, before formation effects."""
    starters = team.starters
    ratings = {}
    for sector, positions in SECTOR_POSITIONS.items():
        subset = [p.overall for p in starters if p.position in positions]
        ratings[sector] = sum(subset) / len(subset) if subset else EMPTY_SECTOR_RATING
    return ratings


def calculate_team_sectors(team: Team, config: Optional[SimulationConfig] = None) -> TeamSectors:
    """
    Calculate the four sector ratings of a team.

    Args:
        team: Team with roster and formation
        config: Simulation options (formation impact)

    Returns:
        TeamSectors with formation modifiers applied
    """
    config = config or DEFAULT_CONFIG
    raw = raw_sector_ratings(team)
    modifiers = FORMATION_MODIFIERS.get(team.formation, {})

    rated = {
        sector: apply_formation_modifier(value, modifiers.get(sector, 1.0), config.formation_impact)
        for sector, value in raw.items()
    }

    return TeamSectors(
        attack=rated[Sector.ATTACK],
        midfield=rated[Sector.MIDFIELD],
        defense=rated[Sector.DEFENSE],
        goalkeeping=rated[Sector.GOALKEEPING]
    )


def calculate_team_overall(team: Team, config: Optional[SimulationConfig] = None) -> int:
    """Weighted overall of a team's sectors, rounded half up."""
    sectors = calculate_team_sectors(team, config)
    weighted = (
        sectors.attack * OVERALL_WEIGHTS[Sector.ATTACK]
        + sectors.midfield * OVERALL_WEIGHTS[Sector.MIDFIELD]
        + sectors.defense * OVERALL_WEIGHTS[Sector.DEFENSE]
        + sectors.goalkeeping * OVERALL_WEIGHTS[Sector.GOALKEEPING]
    )
    return math.floor(weighted + 0.5)


def get_team_sectors_with_overall(
    team: Team,
    config: Optional[SimulationConfig] = None
) -> Tuple[int, TeamSectors]:
    return calculate_team_overall(team, config), calculate_team_sectors(team, config)
