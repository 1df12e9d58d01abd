"""
Tests for league fixture generation.
"""

from collections import Counter

import pytest

from championship_sim.core.football import MatchStatus, Phase
from championship_sim.simulator.exceptions import InvalidInputError, OddTeamCountError
from championship_sim.simulator.fixtures import generate_league_fixture, round_robin_rounds


class TestRoundRobin:
    """Tests for the circle-method rotation."""

    def test_first_rounds(self):
        """Test the pairings of a four-team rotation."""
        rounds = round_robin_rounds(["a", "b", "c", "d"])
        assert rounds == [
            [("a", "d"), ("b", "c")],
            [("a", "c"), ("d", "b")],
            [("a", "b"), ("c", "d")],
        ]

    def test_byes_are_dropped(self):
        """Test that pairings against None are left out."""
        rounds = round_robin_rounds(["a", "b", "c", None])
        assert len(rounds) == 3
        assert all(len(pairings) == 1 for pairings in rounds)
        played = Counter(team for pairings in rounds for pair in pairings for team in pair)
        assert played == {"a": 2, "b": 2, "c": 2}


class TestLeagueFixture:
    """Tests for generate_league_fixture."""

    def test_double_round_robin_size(self, make_teams):
        """Test N(N-1) matches over 2(N-1) rounds."""
        matches = generate_league_fixture(make_teams(6))

        assert len(matches) == 30
        assert sorted({m.round for m in matches}) == list(range(1, 11))

    def test_each_team_once_per_round(self, make_teams):
        """Test that no team plays twice in a round."""
        matches = generate_league_fixture(make_teams(8))

        for round_number in {m.round for m in matches}:
            teams = [t for m in matches if m.round == round_number for t in (m.home_team_id, m.away_team_id)]
            assert len(teams) == len(set(teams)) == 8

    def test_every_ordered_pair_once(self, make_teams):
        """Test that each team hosts every other team exactly once."""
        teams = make_teams(6)
        matches = generate_league_fixture(teams)
        pairs = Counter((m.home_team_id, m.away_team_id) for m in matches)

        assert all(count == 1 for count in pairs.values())
        assert len(pairs) == 6 * 5

    def test_second_leg_mirrors_first(self, four_teams):
        """Test that round N+r swaps home and away of round r."""
        matches = generate_league_fixture(four_teams)
        rounds_per_leg = 3

        for match in matches:
            if match.round > rounds_per_leg:
                continue
            mirror = [
                m for m in matches
                if m.round == match.round + rounds_per_leg
                and (m.home_team_id, m.away_team_id) == (match.away_team_id, match.home_team_id)
            ]
            assert len(mirror) == 1

    def test_match_ids_and_state(self, four_teams):
        """Test ids m-{round}-{index} and initial state."""
        matches = generate_league_fixture(four_teams)

        assert matches[0].id == "m-1-0"
        assert matches[1].id == "m-1-1"
        assert matches[-1].id == "m-6-1"
        assert all(m.status == MatchStatus.SCHEDULED for m in matches)
        assert all(m.phase == Phase.GROUPS for m in matches)
        assert all(m.home_score == 0 and m.away_score == 0 for m in matches)

    def test_single_leg(self, four_teams):
        """Test the single round-robin variant."""
        matches = generate_league_fixture(four_teams, double_leg=False)
        assert len(matches) == 6
        assert max(m.round for m in matches) == 3

    def test_two_teams(self, make_teams):
        """Test the smallest league."""
        matches = generate_league_fixture(make_teams(2))
        assert [(m.home_team_id, m.away_team_id, m.round) for m in matches] == [
            ("t01", "t02", 1),
            ("t02", "t01", 2),
        ]

    def test_odd_team_count(self, make_teams):
        """Test that an odd number of teams is rejected."""
        with pytest.raises(OddTeamCountError) as exc_info:
            generate_league_fixture(make_teams(5))
        assert exc_info.value.team_count == 5

    def test_odd_team_count_is_invalid_input(self, make_teams):
        """Test that OddTeamCountError is also an InvalidInputError and ValueError."""
        with pytest.raises(InvalidInputError):
            generate_league_fixture(make_teams(3))
        with pytest.raises(ValueError):
            generate_league_fixture(make_teams(3))

    def test_duplicate_team(self, make_team):
        """Test that a team listed twice is rejected."""
        team = make_team("a")
        with pytest.raises(InvalidInputError, match="more than once"):
            generate_league_fixture([team, make_team("b"), team, make_team("c")])
