"""
Football Championship Simulator

Fixture generation, match simulation, standings and cup progression.
"""

from .models import (
    Player,
    TeamMetadata,
    Team,
    TeamSectors,
    MatchEvent,
    PenaltyScore,
    Match,
    MatchResult,
    Group,
    ChampionshipSettings,
    Championship,
    StandingEntry,
    CupConfig,
    CupStructure,
    BracketLink,
    GroupStandings,
)
from .config import SimulationConfig, DEFAULT_CONFIG
from .exceptions import (
    ChampionshipError,
    InvalidInputError,
    OddTeamCountError,
    BelowMinimumTeamsError,
    MissingReferenceError,
)
from .sectors import calculate_team_sectors, calculate_team_overall, get_team_sectors_with_overall
from .engine import simulate_match, simulate_penalty_shootout, generate_match_events, calculate_goals
from .fixtures import generate_league_fixture
from .cup_structure import calculate_cup_structure
from .cup_fixtures import CupFixture, generate_cup_fixture, validate_custom_groups
from .bracket import BracketGraph
from .standings import calculate_standings, calculate_group_standings
from .progression import (
    is_phase_completed,
    next_phase,
    winner_of,
    simulate_round,
    simulate_copa_phase,
    update_knockout_teams,
    prepare_next_phase,
    advance_bracket,
    simulate_championship,
    get_champion,
)

__all__ = [
    # Models
    "Player",
    "TeamMetadata",
    "Team",
    "TeamSectors",
    "MatchEvent",
    "PenaltyScore",
    "Match",
    "MatchResult",
    "Group",
    "ChampionshipSettings",
    "Championship",
    "StandingEntry",
    "CupConfig",
    "CupStructure",
    "BracketLink",
    "GroupStandings",
    # Config
    "SimulationConfig",
    "DEFAULT_CONFIG",
    # Errors
    "ChampionshipError",
    "InvalidInputError",
    "OddTeamCountError",
    "BelowMinimumTeamsError",
    "MissingReferenceError",
    # Ratings and engine
    "calculate_team_sectors",
    "calculate_team_overall",
    "get_team_sectors_with_overall",
    "simulate_match",
    "simulate_penalty_shootout",
    "generate_match_events",
    "calculate_goals",
    # Fixtures
    "generate_league_fixture",
    "calculate_cup_structure",
    "CupFixture",
    "generate_cup_fixture",
    "validate_custom_groups",
    "BracketGraph",
    # Standings
    "calculate_standings",
    "calculate_group_standings",
    # Progression
    "is_phase_completed",
    "next_phase",
    "winner_of",
    "simulate_round",
    "simulate_copa_phase",
    "update_knockout_teams",
    "prepare_next_phase",
    "advance_bracket",
    "simulate_championship",
    "get_champion",
]
