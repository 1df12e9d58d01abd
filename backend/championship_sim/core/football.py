"""
Football vocabulary shared by the simulator and the API.
"""

from enum import Enum
from typing import Dict, List, Optional


class Position(str, Enum):
    """Player positions."""
    GK = "GK"
    CB = "CB"
    LB = "LB"
    RB = "RB"
    CDM = "CDM"
    CM = "CM"
    CAM = "CAM"
    ST = "ST"
    LW = "LW"
    RW = "RW"


class Sector(str, Enum):
    """Aggregate strength areas of a team."""
    GOALKEEPING = "goalkeeping"
    DEFENSE = "defense"
    MIDFIELD = "midfield"
    ATTACK = "attack"


class MatchStatus(str, Enum):
    SCHEDULED = "scheduled"
    PLAYING = "playing"
    FINISHED = "finished"


class Phase(str, Enum):
    """Stages of a competition. Leagues only use GROUPS."""
    GROUPS = "groups"
    ROUND_32 = "round_32"
    ROUND_16 = "round_16"
    QUARTERS = "quarters"
    SEMIS = "semis"
    THIRD = "third"
    FINAL = "final"


class ChampionshipType(str, Enum):
    LEAGUE = "league"
    CUP = "cup"


class BracketPath(str, Enum):
    """Slot a winner takes in the next knockout match."""
    HOME = "home"
    AWAY = "away"


class BracketSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


# Positions counted toward each sector rating
SECTOR_POSITIONS = {
    Sector.GOALKEEPING: (Position.GK,),
    Sector.DEFENSE: (Position.CB, Position.LB, Position.RB),
    Sector.MIDFIELD: (Position.CDM, Position.CM, Position.CAM),
    Sector.ATTACK: (Position.ST, Position.LW, Position.RW),
}

# Scorer candidate pools, in priority order
ATTACKING_POSITIONS = (Position.ST, Position.LW, Position.RW)
CREATIVE_MIDFIELD_POSITIONS = (Position.CAM, Position.CM)
DEFENSIVE_POSITIONS = (Position.GK, Position.CB, Position.LB, Position.RB, Position.CDM)

# Multiplicative sector modifiers per formation, before formation impact scaling
FORMATION_MODIFIERS: Dict[str, Dict[Sector, float]] = {
    "4-3-3": {Sector.ATTACK: 1.10, Sector.MIDFIELD: 1.00, Sector.DEFENSE: 0.95, Sector.GOALKEEPING: 1.0},
    "3-5-2": {Sector.ATTACK: 0.95, Sector.MIDFIELD: 1.15, Sector.DEFENSE: 1.05, Sector.GOALKEEPING: 1.0},
    "5-2-3": {Sector.ATTACK: 1.05, Sector.MIDFIELD: 0.85, Sector.DEFENSE: 1.20, Sector.GOALKEEPING: 1.0},
    "4-4-2": {Sector.ATTACK: 1.00, Sector.MIDFIELD: 1.05, Sector.DEFENSE: 1.05, Sector.GOALKEEPING: 1.0},
    "4-2-3-1": {Sector.ATTACK: 1.00, Sector.MIDFIELD: 1.10, Sector.DEFENSE: 1.00, Sector.GOALKEEPING: 1.0},
    "4-5-1": {Sector.ATTACK: 0.85, Sector.MIDFIELD: 1.20, Sector.DEFENSE: 1.10, Sector.GOALKEEPING: 1.0},
    "5-3-2": {Sector.ATTACK: 0.90, Sector.MIDFIELD: 1.00, Sector.DEFENSE: 1.25, Sector.GOALKEEPING: 1.0},
    "3-4-3": {Sector.ATTACK: 1.15, Sector.MIDFIELD: 1.00, Sector.DEFENSE: 0.90, Sector.GOALKEEPING: 1.0},
}

# Bracket size (teams) -> knockout phase
KNOCKOUT_STAGES = {
    32: Phase.ROUND_32,
    16: Phase.ROUND_16,
    8: Phase.QUARTERS,
    4: Phase.SEMIS,
    2: Phase.FINAL,
}

KNOCKOUT_STAGE_SIZES = sorted(KNOCKOUT_STAGES, reverse=True)

# Bracket phases in play order; THIRD runs alongside FINAL
KNOCKOUT_PHASES = [Phase.ROUND_32, Phase.ROUND_16, Phase.QUARTERS, Phase.SEMIS, Phase.FINAL]

PHASE_ORDER = [Phase.GROUPS] + KNOCKOUT_PHASES[:-1] + [Phase.THIRD, Phase.FINAL]


def is_knockout_phase(phase: Phase) -> bool:
    """True for every phase decided by elimination, third place included."""
    return phase != Phase.GROUPS


def phase_for_stage(stage_size: int) -> Phase:
    """Get the knockout phase played by ``stage_size`` teams (rounded down to a stage)."""
    for size in KNOCKOUT_STAGE_SIZES:
        if stage_size >= size:
            return KNOCKOUT_STAGES[size]
    return Phase.FINAL


def phases_from(initial_phase: Phase) -> List[Phase]:
    """Knockout phases from ``initial_phase`` through the final."""
    return KNOCKOUT_PHASES[KNOCKOUT_PHASES.index(initial_phase):]


def following_phase(phase: Phase) -> Optional[Phase]:
    """The bracket phase fed by ``phase``, or None after the final."""
    if phase in (Phase.GROUPS, Phase.THIRD):
        return None
    index = KNOCKOUT_PHASES.index(phase)
    if index + 1 < len(KNOCKOUT_PHASES):
        return KNOCKOUT_PHASES[index + 1]
    return None
