"""
Tests for standings and tiebreakers.
"""

import logging

import pytest

from championship_sim.core.football import ChampionshipType, Phase
from championship_sim.simulator.exceptions import InvalidInputError, MissingReferenceError
from championship_sim.simulator.fixtures import generate_league_fixture
from championship_sim.simulator.models import Championship, ChampionshipSettings, Group, StandingEntry
from championship_sim.simulator.standings import calculate_group_standings, calculate_standings
from championship_sim.simulator.tiebreakers import name_sort_key, unresolved_ties


class TestCalculateStandings:
    """Tests for calculate_standings."""

    def test_points_and_counters(self, four_teams, finished_match):
        """Test win, draw and loss bookkeeping."""
        matches = [
            finished_match("m1", "t01", "t02", 2, 0),
            finished_match("m2", "t03", "t04", 1, 1),
        ]
        table = {e.team_id: e for e in calculate_standings(four_teams, matches)}

        assert table["t01"].points == 3
        assert table["t01"].wins == 1
        assert table["t01"].goal_difference == 2
        assert table["t02"].losses == 1
        assert table["t02"].goals_against == 2
        assert table["t03"].points == 1
        assert table["t04"].draws == 1
        assert all(e.played == 1 for e in table.values())

    def test_ranking_by_points(self, four_teams, finished_match):
        """Test that more points rank higher."""
        matches = [
            finished_match("m1", "t04", "t01", 1, 0),
            finished_match("m2", "t03", "t02", 0, 0),
        ]
        table = calculate_standings(four_teams, matches)
        assert table[0].team_id == "t04"
        assert table[-1].team_id == "t01"

    def test_goal_difference_breaks_tie(self, four_teams, finished_match):
        """Test that goal difference separates teams level on points."""
        matches = [
            finished_match("m1", "t02", "t03", 1, 0),
            finished_match("m2", "t04", "t01", 3, 0),
        ]
        table = calculate_standings(four_teams, matches)
        assert [e.team_id for e in table[:2]] == ["t04", "t02"]

    def test_goals_for_breaks_tie(self, four_teams, finished_match):
        """Test that goals scored separate teams level on points and difference."""
        matches = [
            finished_match("m1", "t02", "t03", 1, 0),
            finished_match("m2", "t04", "t01", 3, 2),
        ]
        table = calculate_standings(four_teams, matches)
        assert [e.team_id for e in table[:2]] == ["t04", "t02"]

    def test_full_ties_keep_team_order(self, four_teams, finished_match):
        """Test that teams level on every criterion keep input order."""
        matches = [
            finished_match("m1", "t03", "t04", 1, 0),
            finished_match("m2", "t01", "t02", 1, 0),
        ]
        table = calculate_standings(four_teams, matches)
        assert [e.team_id for e in table] == ["t01", "t03", "t02", "t04"]

    def test_match_order_does_not_matter(self, four_teams, finished_match):
        """Test that reordering the match list gives the same table."""
        matches = [
            finished_match("m1", "t01", "t02", 2, 2),
            finished_match("m2", "t03", "t04", 0, 1),
            finished_match("m3", "t01", "t03", 1, 0),
            finished_match("m4", "t02", "t04", 3, 1),
        ]
        forward = [e.to_dict() for e in calculate_standings(four_teams, matches)]
        backward = [e.to_dict() for e in calculate_standings(four_teams, list(reversed(matches)))]
        assert forward == backward

    def test_unfinished_matches_ignored(self, four_teams, finished_match):
        """Test that scheduled matches do not count."""
        matches = generate_league_fixture(four_teams)
        matches.append(finished_match("x", "t02", "t01", 1, 0))
        table = calculate_standings(four_teams, matches)

        assert sum(e.played for e in table) == 2
        assert table[0].team_id == "t02"

    def test_alphabetical_before_any_result(self, make_team):
        """Test that an unplayed table is sorted by name, ignoring accents and case."""
        teams = [make_team("1", name="Zaragoza"), make_team("2", name="ávila"), make_team("3", name="Barcelona")]
        table = calculate_standings(teams, [])
        assert [e.team_name for e in table] == ["ávila", "Barcelona", "Zaragoza"]

    def test_custom_points(self, four_teams, finished_match):
        """Test non-default points per win and draw."""
        settings = ChampionshipSettings(points_win=2, points_draw=0)
        matches = [finished_match("m1", "t01", "t02", 1, 0), finished_match("m2", "t03", "t04", 0, 0)]
        table = {e.team_id: e for e in calculate_standings(four_teams, matches, settings)}
        assert table["t01"].points == 2
        assert table["t03"].points == 0

    def test_points_invariant(self, four_teams, finished_match):
        """Test points == 3*wins + draws and goal difference == for - against."""
        matches = [
            finished_match("m1", "t01", "t02", 2, 2),
            finished_match("m2", "t03", "t04", 0, 1),
            finished_match("m3", "t01", "t04", 4, 0),
        ]
        for entry in calculate_standings(four_teams, matches):
            assert entry.points == 3 * entry.wins + entry.draws
            assert entry.goal_difference == entry.goals_for - entry.goals_against
            assert entry.played == entry.wins + entry.draws + entry.losses

    def test_unknown_team(self, four_teams, finished_match):
        """Test that a result involving an unknown team raises."""
        with pytest.raises(MissingReferenceError, match="t99"):
            calculate_standings(four_teams, [finished_match("m1", "t01", "t99", 1, 0)])

    def test_input_not_mutated(self, four_teams, finished_match):
        """Test that the match list is read only."""
        matches = [finished_match("m1", "t01", "t02", 1, 0)]
        before = [m.to_dict() for m in matches]
        calculate_standings(four_teams, matches)
        assert [m.to_dict() for m in matches] == before


class TestGroupStandings:
    """Tests for calculate_group_standings."""

    @pytest.fixture
    def cup(self, four_teams):
        return Championship(
            id="cup-1",
            name="Test Cup",
            season="2025",
            type=ChampionshipType.CUP,
            teams=four_teams,
            groups=[
                Group(id="group-A", name="A", team_ids=["t01", "t02"]),
                Group(id="group-B", name="B", team_ids=["t03", "t04"]),
            ]
        )

    def test_one_table_per_group(self, cup, finished_match):
        """Test that each table only counts its own group's matches."""
        matches = [
            finished_match("a1", "t01", "t02", 0, 1, group="group-A"),
            finished_match("b1", "t03", "t04", 2, 0, group="group-B"),
        ]
        tables = calculate_group_standings(cup, matches)

        assert [[e.team_id for e in t] for t in tables] == [["t02", "t01"], ["t03", "t04"]]
        assert all(e.group == "group-A" for e in tables[0])
        assert tables[1][0].points == 3

    def test_knockout_matches_excluded(self, cup, finished_match):
        """Test that knockout results do not affect group tables."""
        matches = [
            finished_match("a1", "t01", "t02", 0, 1, group="group-A"),
            finished_match("ko", "t01", "t02", 5, 0, phase=Phase.FINAL),
        ]
        tables = calculate_group_standings(cup, matches)
        assert tables[0][0].team_id == "t02"
        assert tables[0][1].goals_for == 0

    def test_no_groups(self, league):
        """Test that a championship without groups raises."""
        with pytest.raises(InvalidInputError):
            calculate_group_standings(league, [])

    def test_unknown_group_team(self, cup):
        """Test that a group listing an unknown team raises."""
        cup.groups[0].team_ids.append("ghost")
        with pytest.raises(MissingReferenceError, match="ghost"):
            calculate_group_standings(cup, [])

    def test_unknown_group_in_match(self, cup, finished_match):
        """Test that a group match tagged with a group not in the cup raises."""
        matches = [
            finished_match("a1", "t01", "t02", 0, 1, group="group-A"),
            finished_match("z1", "t03", "t04", 9, 0, group="group-Z"),
        ]
        with pytest.raises(MissingReferenceError, match="group-Z"):
            calculate_group_standings(cup, matches)

    def test_untagged_group_match(self, cup, finished_match):
        """Test that a group match without a group raises."""
        matches = [finished_match("x1", "t01", "t03", 1, 0)]
        with pytest.raises(MissingReferenceError, match="x1"):
            calculate_group_standings(cup, matches)


class TestTiebreakers:
    """Tests for tiebreaker helpers."""

    def test_name_sort_key(self):
        """Test accent and case folding."""
        assert name_sort_key("Ávila") == name_sort_key("avila")

    def test_unresolved_ties(self):
        """Test detection of rows no rule separates."""
        entries = [
            StandingEntry(team_id="a", team_name="A", points=6, goal_difference=3, goals_for=5),
            StandingEntry(team_id="b", team_name="B", points=4, goal_difference=1, goals_for=2),
            StandingEntry(team_id="c", team_name="C", points=4, goal_difference=1, goals_for=2),
            StandingEntry(team_id="d", team_name="D", points=0),
        ]
        ties = unresolved_ties(entries)
        assert [[e.team_id for e in tie] for tie in ties] == [["b", "c"]]

    def test_unresolved_tie_logged(self, four_teams, finished_match, caplog):
        """Test that a table with rows no rule separates logs them and keeps team order."""
        matches = [
            finished_match("m1", "t01", "t02", 1, 1),
            finished_match("m2", "t03", "t04", 1, 1),
        ]
        with caplog.at_level(logging.DEBUG, logger="championship_sim.simulator.standings"):
            table = calculate_standings(four_teams, matches)

        assert [e.team_id for e in table] == ["t01", "t02", "t03", "t04"]
        assert "Unresolved tie between t01, t02, t03, t04" in caplog.text
