"""
Data models for the championship simulator.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from ..core.football import (
    BracketPath,
    BracketSide,
    ChampionshipType,
    MatchStatus,
    Phase,
    Position,
)


@dataclass
class Player:
    """A squad member. Only starters count toward sector ratings and scoring."""

    id: str
    name: str
    position: Position
    overall: int
    age: int = 25
    energy: int = 100
    is_reserve: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "position": self.position.value,
            "overall": self.overall,
            "energy": self.energy,
            "is_reserve": self.is_reserve
        }


@dataclass
class TeamMetadata:
    """Historical context for a team."""

    head_to_head_bias: Dict[str, float] = field(default_factory=dict)  # opponent id -> multiplier
    trend: float = 0.0  # -1 (crisis) to 1 (peak)
    prestige: int = 1

    def to_dict(self) -> dict:
        return {
            "head_to_head_bias": dict(self.head_to_head_bias),
            "trend": self.trend,
            "prestige": self.prestige
        }


@dataclass
class Team:
    """A club with its formation and roster."""

    id: str
    name: str
    formation: str = "4-4-2"
    players: List[Player] = field(default_factory=list)
    metadata: TeamMetadata = field(default_factory=TeamMetadata)
    short_name: Optional[str] = None

    @property
    def starters(self) -> List[Player]:
        return [p for p in self.players if not p.is_reserve]

    @property
    def average_overall(self) -> float:
        if not self.players:
            return 0.0
        return sum(p.overall for p in self.players) / len(self.players)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "formation": self.formation,
            "players": [p.to_dict() for p in self.players],
            "metadata": self.metadata.to_dict()
        }


@dataclass
class TeamSectors:
    """Per-sector strength ratings, computed at runtime."""

    attack: float
    midfield: float
    defense: float
    goalkeeping: float

    def to_dict(self) -> dict:
        return {
            "attack": self.attack,
            "midfield": self.midfield,
            "defense": self.defense,
            "goalkeeping": self.goalkeeping
        }


@dataclass
class MatchEvent:
    """Something that happened during a match. The engine only emits goals."""

    minute: int
    player_id: str
    team_id: str
    type: str = "goal"
    player_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "minute": self.minute,
            "type": self.type,
            "player_id": self.player_id,
            "team_id": self.team_id,
            "player_name": self.player_name
        }


@dataclass
class PenaltyScore:
    home: int
    away: int

    def to_dict(self) -> dict:
        return {"home": self.home, "away": self.away}


@dataclass
class Match:
    """
    A fixture. Knockout matches start with empty team slots and are filled
    as their feeders are decided.
    """

    id: str
    home_team_id: Optional[str]
    away_team_id: Optional[str]
    round: int
    phase: Phase = Phase.GROUPS
    home_score: int = 0
    away_score: int = 0
    status: MatchStatus = MatchStatus.SCHEDULED
    group: Optional[str] = None
    events: List[MatchEvent] = field(default_factory=list)
    penalty_score: Optional[PenaltyScore] = None
    next_match_id: Optional[str] = None
    path: Optional[BracketPath] = None
    bracket_side: Optional[BracketSide] = None
    is_bye: bool = False

    @property
    def is_finished(self) -> bool:
        return self.status == MatchStatus.FINISHED

    @property
    def has_teams(self) -> bool:
        return self.home_team_id is not None and self.away_team_id is not None

    @property
    def is_draw(self) -> bool:
        return self.home_score == self.away_score

    def copy(self) -> 'Match':
        """Create a copy of this match that can be updated independently."""
        return replace(
            self,
            events=list(self.events),
            penalty_score=replace(self.penalty_score) if self.penalty_score else None
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "status": self.status.value,
            "round": self.round,
            "phase": self.phase.value,
            "group": self.group,
            "events": [e.to_dict() for e in self.events],
            "penalty_score": self.penalty_score.to_dict() if self.penalty_score else None,
            "next_match_id": self.next_match_id,
            "path": self.path.value if self.path else None,
            "bracket_side": self.bracket_side.value if self.bracket_side else None,
            "is_bye": self.is_bye
        }


@dataclass
class MatchResult:
    """Outcome of a single simulated match."""

    home_score: int
    away_score: int
    round: int
    events: List[MatchEvent] = field(default_factory=list)
    status: MatchStatus = MatchStatus.FINISHED

    def to_dict(self) -> dict:
        return {
            "home_score": self.home_score,
            "away_score": self.away_score,
            "status": self.status.value,
            "round": self.round,
            "events": [e.to_dict() for e in self.events]
        }


@dataclass
class Group:
    """A group-stage pool."""

    id: str
    name: str
    team_ids: List[str] = field(default_factory=list)

    def copy(self) -> 'Group':
        return Group(id=self.id, name=self.name, team_ids=list(self.team_ids))

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "team_ids": list(self.team_ids)}


@dataclass
class ChampionshipSettings:
    """Competition rules."""

    points_win: int = 3
    points_draw: int = 1
    double_legs: bool = True
    min_teams_per_group: int = 3
    max_teams_per_group: int = 6
    qualified_per_group: int = 2
    has_third_place: bool = True


@dataclass
class Championship:
    """A competition as supplied by the caller."""

    id: str
    name: str
    season: str
    type: ChampionshipType
    teams: List[Team]
    settings: ChampionshipSettings = field(default_factory=ChampionshipSettings)
    groups: Optional[List[Group]] = None
    custom_groups: Optional[List[Group]] = None

    def team_by_id(self) -> Dict[str, Team]:
        return {team.id: team for team in self.teams}


@dataclass
class StandingEntry:
    """One row of a league or group table."""

    team_id: str
    team_name: str
    played: int = 0
    points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    group: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "played": self.played,
            "points": self.points,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "group": self.group
        }


@dataclass
class CupConfig:
    """Group sizing bounds for a cup."""

    min_teams_per_group: int = 3
    max_teams_per_group: int = 6
    qualified_per_group: int = 2

    @classmethod
    def from_settings(cls, settings: ChampionshipSettings) -> 'CupConfig':
        return cls(
            min_teams_per_group=settings.min_teams_per_group,
            max_teams_per_group=settings.max_teams_per_group,
            qualified_per_group=settings.qualified_per_group
        )


@dataclass
class CupStructure:
    """Group layout and knockout depth decided for a cup."""

    groups: List[Group]
    group_count: int
    teams_per_group: int
    qualified_per_group: int
    total_qualified: int
    initial_knockout_stage: int
    initial_knockout_phase: Phase
    knockout_stages: List[int]
    config: CupConfig

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "group_count": self.group_count,
            "teams_per_group": self.teams_per_group,
            "qualified_per_group": self.qualified_per_group,
            "total_qualified": self.total_qualified,
            "initial_knockout_stage": self.initial_knockout_stage,
            "initial_knockout_phase": self.initial_knockout_phase.value,
            "knockout_stages": list(self.knockout_stages)
        }


@dataclass
class BracketLink:
    """Edge of the knockout graph: the winner of ``match_id`` moves on."""

    match_id: str
    next_match_id: str
    path: BracketPath


# Type alias for per-group tables, in group order
GroupStandings = List[List[StandingEntry]]
