"""
Core enums and football constants.
"""

from .football import (
    Position,
    Sector,
    MatchStatus,
    Phase,
    ChampionshipType,
    BracketPath,
    BracketSide,
    FORMATION_MODIFIERS,
    KNOCKOUT_STAGES,
    PHASE_ORDER,
)

__all__ = [
    "Position",
    "Sector",
    "MatchStatus",
    "Phase",
    "ChampionshipType",
    "BracketPath",
    "BracketSide",
    "FORMATION_MODIFIERS",
    "KNOCKOUT_STAGES",
    "PHASE_ORDER",
]
