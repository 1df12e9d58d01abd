"""
Shared fixtures for the championship simulator tests.
"""

import random

import pytest

from championship_sim.core.football import ChampionshipType, MatchStatus, Phase, Position
from championship_sim.simulator.models import (
    Championship,
    ChampionshipSettings,
    Match,
    Player,
    Team,
    TeamMetadata,
)


STARTING_POSITIONS = [
    Position.GK,
    Position.LB, Position.CB, Position.CB, Position.RB,
    Position.CDM, Position.CM, Position.CAM,
    Position.LW, Position.ST, Position.RW,
]


def build_team(team_id, overall=70, name=None, formation="4-4-2", positions=None, reserves=0, trend=0.0):
    positions = STARTING_POSITIONS if positions is None else positions
    players = [
        Player(id=f"{team_id}-p{i}", name=f"{team_id} player {i}", position=position, overall=overall)
        for i, position in enumerate(positions)
    ]
    players += [
        Player(id=f"{team_id}-r{i}", name=f"{team_id} reserve {i}", position=Position.ST,
               overall=overall, is_reserve=True)
        for i in range(reserves)
    ]
    return Team(
        id=team_id,
        name=name or f"Team {team_id}",
        formation=formation,
        players=players,
        metadata=TeamMetadata(trend=trend)
    )


def build_teams(count, top_overall=90):
    """Teams t01, t02, ... with strictly decreasing strength."""
    return [build_team(f"t{i + 1:02d}", overall=top_overall - i) for i in range(count)]


@pytest.fixture
def make_team():
    return build_team


@pytest.fixture
def make_teams():
    return build_teams


@pytest.fixture
def rng():
    """Seeded random source for reproducible simulations."""
    return random.Random(1234)


@pytest.fixture
def four_teams():
    return build_teams(4)


@pytest.fixture
def league(four_teams):
    return Championship(
        id="league-1",
        name="Test League",
        season="2025",
        type=ChampionshipType.LEAGUE,
        teams=four_teams
    )


@pytest.fixture
def finished_match():
    """Factory for a finished group match."""
    def _make(match_id, home, away, home_score, away_score, round_number=1, group=None, phase=Phase.GROUPS):
        return Match(
            id=match_id,
            home_team_id=home,
            away_team_id=away,
            round=round_number,
            phase=phase,
            home_score=home_score,
            away_score=away_score,
            status=MatchStatus.FINISHED,
            group=group
        )
    return _make


@pytest.fixture
def settings():
    return ChampionshipSettings()
