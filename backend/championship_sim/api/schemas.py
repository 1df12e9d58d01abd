"""
Pydantic schemas for API request/response validation.

Request schemas convert to the simulator's dataclasses with ``to_domain()``;
response schemas are built from the dataclasses' ``to_dict()`` output.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..core.football import (
    BracketPath,
    BracketSide,
    ChampionshipType,
    MatchStatus,
    Phase,
    Position,
)
from ..simulator import models


# ============== Team Schemas ==============

class PlayerSchema(BaseModel):
    """Squad member."""
    id: str = Field(..., min_length=1)
    name: str
    position: Position
    overall: int = Field(..., ge=0, le=100)
    age: int = Field(default=25, ge=0)
    energy: int = Field(default=100, ge=0, le=100)
    is_reserve: bool = False

    def to_domain(self) -> models.Player:
        return models.Player(**self.model_dump())


class TeamMetadataSchema(BaseModel):
    head_to_head_bias: Dict[str, float] = Field(default_factory=dict)
    trend: float = Field(default=0.0, ge=-1.0, le=1.0)
    prestige: int = Field(default=1, ge=1, le=5)

    def to_domain(self) -> models.TeamMetadata:
        return models.TeamMetadata(**self.model_dump())


class TeamSchema(BaseModel):
    """Club with formation and roster."""
    id: str = Field(..., min_length=1)
    name: str
    short_name: Optional[str] = None
    formation: str = "4-4-2"
    players: List[PlayerSchema] = Field(default_factory=list)
    metadata: TeamMetadataSchema = Field(default_factory=TeamMetadataSchema)

    def to_domain(self) -> models.Team:
        return models.Team(
            id=self.id,
            name=self.name,
            short_name=self.short_name,
            formation=self.formation,
            players=[p.to_domain() for p in self.players],
            metadata=self.metadata.to_domain()
        )


# ============== Match Schemas ==============

class MatchEventSchema(BaseModel):
    minute: int = Field(..., ge=1)
    type: str = "goal"
    player_id: str
    team_id: str
    player_name: Optional[str] = None


class PenaltyScoreSchema(BaseModel):
    home: int = Field(..., ge=0)
    away: int = Field(..., ge=0)


class MatchSchema(BaseModel):
    """Fixture with its result, if played."""
    id: str
    home_team_id: Optional[str] = None
    away_team_id: Optional[str] = None
    home_score: int = Field(default=0, ge=0)
    away_score: int = Field(default=0, ge=0)
    status: MatchStatus = MatchStatus.SCHEDULED
    round: int = Field(..., ge=1)
    phase: Phase = Phase.GROUPS
    group: Optional[str] = None
    events: List[MatchEventSchema] = Field(default_factory=list)
    penalty_score: Optional[PenaltyScoreSchema] = None
    next_match_id: Optional[str] = None
    path: Optional[BracketPath] = None
    bracket_side: Optional[BracketSide] = None
    is_bye: bool = False

    def to_domain(self) -> models.Match:
        data = self.model_dump()
        data["events"] = [models.MatchEvent(**e) for e in data["events"]]
        if data["penalty_score"] is not None:
            data["penalty_score"] = models.PenaltyScore(**data["penalty_score"])
        return models.Match(**data)

    @classmethod
    def from_domain(cls, match: models.Match) -> 'MatchSchema':
        return cls.model_validate(match.to_dict())


class MatchResultSchema(BaseModel):
    home_score: int
    away_score: int
    status: MatchStatus
    round: int
    events: List[MatchEventSchema]


# ============== Championship Schemas ==============

class GroupSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    team_ids: List[str] = Field(default_factory=list)

    def to_domain(self) -> models.Group:
        return models.Group(id=self.id, name=self.name, team_ids=list(self.team_ids))


class ChampionshipSettingsSchema(BaseModel):
    """Competition rules."""
    points_win: int = Field(default=3, ge=0)
    points_draw: int = Field(default=1, ge=0)
    double_legs: bool = True
    min_teams_per_group: int = Field(default=3, ge=2)
    max_teams_per_group: int = Field(default=6, ge=2)
    qualified_per_group: int = Field(default=2, ge=1)
    has_third_place: bool = True

    def to_domain(self) -> models.ChampionshipSettings:
        return models.ChampionshipSettings(**self.model_dump())


class ChampionshipSchema(BaseModel):
    """Competition as supplied by the client."""
    id: str
    name: str
    season: str = ""
    type: ChampionshipType
    teams: List[TeamSchema]
    settings: ChampionshipSettingsSchema = Field(default_factory=ChampionshipSettingsSchema)
    groups: Optional[List[GroupSchema]] = None
    custom_groups: Optional[List[GroupSchema]] = None

    def to_domain(self) -> models.Championship:
        return models.Championship(
            id=self.id,
            name=self.name,
            season=self.season,
            type=self.type,
            teams=[t.to_domain() for t in self.teams],
            settings=self.settings.to_domain(),
            groups=[g.to_domain() for g in self.groups] if self.groups is not None else None,
            custom_groups=[g.to_domain() for g in self.custom_groups] if self.custom_groups is not None else None
        )


class CupConfigSchema(BaseModel):
    min_teams_per_group: int = Field(default=3, ge=2)
    max_teams_per_group: int = Field(default=6, ge=2)
    qualified_per_group: int = Field(default=2, ge=1)

    def to_domain(self) -> models.CupConfig:
        return models.CupConfig(**self.model_dump())


class StandingEntrySchema(BaseModel):
    """One table row."""
    team_id: str
    team_name: str
    played: int
    points: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    group: Optional[str] = None


class CupStructureSchema(BaseModel):
    groups: List[GroupSchema]
    group_count: int
    teams_per_group: int
    qualified_per_group: int
    total_qualified: int
    initial_knockout_stage: int
    initial_knockout_phase: Phase
    knockout_stages: List[int]


# ============== Requests ==============

class SimulationOptions(BaseModel):
    """Reproducibility and tuning knobs shared by every simulation request."""
    seed: Optional[int] = None
    config_overrides: Dict[str, float] = Field(default_factory=dict)


class LeagueFixtureRequest(BaseModel):
    teams: List[TeamSchema]
    double_leg: bool = True


class CupStructureRequest(BaseModel):
    teams: List[TeamSchema]
    config: CupConfigSchema = Field(default_factory=CupConfigSchema)


class CupFixtureRequest(BaseModel):
    """Draw a cup."""
    teams: List[TeamSchema]
    has_third_place: bool = True
    config: CupConfigSchema = Field(default_factory=CupConfigSchema)
    custom_groups: Optional[List[GroupSchema]] = None


class MatchSimulationRequest(SimulationOptions):
    home: TeamSchema
    away: TeamSchema
    round: int = Field(default=1, ge=1)
    knockout: bool = False  # settle draws on penalties


class RoundSimulationRequest(SimulationOptions):
    championship: ChampionshipSchema
    matches: List[MatchSchema]
    round: int = Field(..., ge=1)


class CupPhaseRequest(SimulationOptions):
    championship: ChampionshipSchema
    matches: List[MatchSchema]
    phase: Phase


class NextPhaseRequest(SimulationOptions):
    championship: ChampionshipSchema
    matches: List[MatchSchema]
    current_phase: Phase
    next_phase: Phase


class ChampionshipSimulationRequest(SimulationOptions):
    """Play a whole competition. Without matches a fresh fixture is generated."""
    championship: ChampionshipSchema
    matches: Optional[List[MatchSchema]] = None


class StandingsRequest(BaseModel):
    championship: ChampionshipSchema
    matches: List[MatchSchema]


# ============== Responses ==============

class LeagueFixtureResponse(BaseModel):
    matches: List[MatchSchema]
    rounds: int


class CupFixtureResponse(BaseModel):
    """Drawn cup."""
    matches: List[MatchSchema]
    groups: List[GroupSchema]
    structure: CupStructureSchema
    bracket: Dict[str, Any]


class MatchSimulationResponse(BaseModel):
    home_team_id: str
    away_team_id: str
    result: MatchResultSchema
    penalty_score: Optional[PenaltyScoreSchema] = None


class MatchesResponse(BaseModel):
    matches: List[MatchSchema]


class ChampionshipSimulationResponse(BaseModel):
    """Finished competition."""
    matches: List[MatchSchema]
    groups: Optional[List[GroupSchema]] = None
    standings: List[StandingEntrySchema]
    champion_id: Optional[str] = None


class StandingsResponse(BaseModel):
    standings: List[StandingEntrySchema]


class GroupTableSchema(BaseModel):
    group: GroupSchema
    standings: List[StandingEntrySchema]


class GroupStandingsResponse(BaseModel):
    groups: List[GroupTableSchema]


# ============== Error Schemas ==============

class ErrorResponse(BaseModel):
    """API error response."""
    detail: str
    code: Optional[str] = None
