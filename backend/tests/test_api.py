"""
Tests for the HTTP API.
"""

import runpy
from unittest.mock import patch

import httpx
import pytest

from championship_sim.main import app


def api_client():
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.fixture
def team_payloads(make_teams):
    """JSON bodies for teams t01, t02, ..."""
    return lambda count: [team.to_dict() for team in make_teams(count)]


def championship_payload(teams, type_="league", **extra):
    return {"id": "c1", "name": "Test", "season": "2025", "type": type_, "teams": teams, **extra}


class TestMeta:
    """Tests for the informational endpoints."""

    @pytest.mark.asyncio
    async def test_health(self):
        """Test the health check."""
        async with api_client() as client:
            response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_root(self):
        """Test the root endpoint."""
        async with api_client() as client:
            response = await client.get("/")
        assert response.json()["health"] == "/api/health"

    def test_run_as_script(self, monkeypatch):
        """Test that running the module starts uvicorn on the configured port."""
        monkeypatch.setenv("PORT", "9001")
        with patch("uvicorn.run") as run:
            runpy.run_module("championship_sim.main", run_name="__main__")

        run.assert_called_once()
        assert run.call_args.args == ("championship_sim.main:app",)
        assert run.call_args.kwargs["port"] == 9001


class TestFixtureRoutes:
    """Tests for /api/fixtures."""

    @pytest.mark.asyncio
    async def test_league_fixture(self, team_payloads):
        """Test a double round-robin for four teams."""
        async with api_client() as client:
            response = await client.post("/api/fixtures/league", json={"teams": team_payloads(4)})

        assert response.status_code == 200
        data = response.json()
        assert len(data["matches"]) == 12
        assert data["rounds"] == 6
        assert data["matches"][0]["id"] == "m-1-0"
        assert data["matches"][0]["status"] == "scheduled"

    @pytest.mark.asyncio
    async def test_league_fixture_odd_teams(self, team_payloads):
        """Test that an odd team count is a bad request."""
        async with api_client() as client:
            response = await client.post("/api/fixtures/league", json={"teams": team_payloads(5)})
        assert response.status_code == 400
        assert "even number" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_invalid_player(self, team_payloads):
        """Test that schema validation rejects bad ratings."""
        teams = team_payloads(2)
        teams[0]["players"][0]["overall"] = 150
        async with api_client() as client:
            response = await client.post("/api/fixtures/league", json={"teams": teams})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_cup_structure(self, team_payloads):
        """Test the structure preview for twelve teams."""
        async with api_client() as client:
            response = await client.post("/api/fixtures/cup/structure", json={"teams": team_payloads(12)})

        data = response.json()
        assert response.status_code == 200
        assert data["group_count"] == 2
        assert data["qualified_per_group"] == 4
        assert data["initial_knockout_phase"] == "quarters"

    @pytest.mark.asyncio
    async def test_cup_structure_too_few_teams(self, team_payloads):
        """Test that a cup below the minimum is a bad request."""
        async with api_client() as client:
            response = await client.post("/api/fixtures/cup/structure", json={"teams": team_payloads(2)})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_cup_fixture(self, team_payloads):
        """Test drawing a sixteen-team cup."""
        async with api_client() as client:
            response = await client.post("/api/fixtures/cup", json={"teams": team_payloads(16)})

        data = response.json()
        assert response.status_code == 200
        assert len(data["groups"]) == 4
        assert len(data["matches"]) == 32
        assert data["bracket"]["third_place_match_id"] == "ko-third-1"

    @pytest.mark.asyncio
    async def test_cup_fixture_unknown_group_team(self, team_payloads):
        """Test that custom groups with unknown teams are unprocessable."""
        body = {
            "teams": team_payloads(3),
            "custom_groups": [{"id": "g1", "name": "G1", "team_ids": ["t01", "t02", "ghost"]}]
        }
        async with api_client() as client:
            response = await client.post("/api/fixtures/cup", json=body)
        assert response.status_code == 422
        assert "ghost" in response.json()["detail"]


class TestSimulationRoutes:
    """Tests for /api/simulations."""

    @pytest.mark.asyncio
    async def test_match_is_reproducible(self, team_payloads):
        """Test that a seed makes the result repeatable."""
        home, away = team_payloads(2)
        body = {"home": home, "away": away, "round": 2, "seed": 42}

        async with api_client() as client:
            first = await client.post("/api/simulations/match", json=body)
            second = await client.post("/api/simulations/match", json=body)

        assert first.status_code == 200
        assert first.json() == second.json()
        result = first.json()["result"]
        assert result["status"] == "finished"
        assert result["round"] == 2
        assert len(result["events"]) == result["home_score"] + result["away_score"]

    @pytest.mark.asyncio
    async def test_knockout_match_never_drawn(self, team_payloads):
        """Test that knockout mode settles draws on penalties."""
        home, away = team_payloads(2)
        async with api_client() as client:
            for seed in range(10):
                response = await client.post(
                    "/api/simulations/match",
                    json={"home": home, "away": away, "seed": seed, "knockout": True}
                )
                data = response.json()
                if data["result"]["home_score"] == data["result"]["away_score"]:
                    assert data["penalty_score"]["home"] != data["penalty_score"]["away"]
                else:
                    assert data["penalty_score"] is None

    @pytest.mark.asyncio
    async def test_unknown_config_override(self, team_payloads):
        """Test that unknown options are a bad request."""
        home, away = team_payloads(2)
        body = {"home": home, "away": away, "config_overrides": {"luck": 2.0}}
        async with api_client() as client:
            response = await client.post("/api/simulations/match", json=body)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_config_override_applied(self, team_payloads):
        """Test that overrides reach the engine."""
        home, away = team_payloads(2)
        overrides = {"goals_above_max": 0, "goals_above_mid": 0, "goals_above_min": 0, "goals_otherwise": 0}
        body = {"home": home, "away": away, "seed": 1, "config_overrides": overrides}
        async with api_client() as client:
            response = await client.post("/api/simulations/match", json=body)
        result = response.json()["result"]
        assert (result["home_score"], result["away_score"]) == (0, 0)

    @pytest.mark.asyncio
    async def test_league_round_then_standings(self, team_payloads):
        """Test simulating a round and reading the table."""
        teams = team_payloads(4)
        championship = championship_payload(teams)

        async with api_client() as client:
            fixture = (await client.post("/api/fixtures/league", json={"teams": teams})).json()
            played = await client.post("/api/simulations/round", json={
                "championship": championship, "matches": fixture["matches"], "round": 1, "seed": 5
            })
            matches = played.json()["matches"]
            standings = await client.post("/api/standings", json={
                "championship": championship, "matches": matches
            })

        assert played.status_code == 200
        assert sum(1 for m in matches if m["status"] == "finished") == 2
        table = standings.json()["standings"]
        assert len(table) == 4
        assert all(row["played"] == 1 for row in table)

    @pytest.mark.asyncio
    async def test_cup_phase_and_next_phase(self, team_payloads):
        """Test playing a group stage and seeding the knockout phase."""
        teams = team_payloads(8)

        async with api_client() as client:
            fixture = (await client.post("/api/fixtures/cup", json={"teams": teams})).json()
            championship = championship_payload(teams, "cup", groups=fixture["groups"])
            matches = fixture["matches"]

            for seed in range(3):
                response = await client.post("/api/simulations/cup/phase", json={
                    "championship": championship, "matches": matches, "phase": "groups", "seed": seed
                })
                matches = response.json()["matches"]

            response = await client.post("/api/simulations/cup/next-phase", json={
                "championship": championship,
                "matches": matches,
                "current_phase": "groups",
                "next_phase": "semis",
                "seed": 1
            })
            group_tables = await client.post("/api/standings/groups", json={
                "championship": championship, "matches": matches
            })

        assert response.status_code == 200
        semis = [m for m in response.json()["matches"] if m["phase"] == "semis"]
        assert len(semis) == 2
        assert all(m["home_team_id"] and m["away_team_id"] for m in semis)

        tables = group_tables.json()["groups"]
        assert [t["group"]["id"] for t in tables] == ["group-A", "group-B"]
        assert all(row["played"] == 3 for t in tables for row in t["standings"])

    @pytest.mark.asyncio
    async def test_unknown_team_in_matches(self, team_payloads):
        """Test that a match against an unknown team is unprocessable."""
        teams = team_payloads(2)
        matches = [{"id": "m-1-0", "home_team_id": "t01", "away_team_id": "ghost", "round": 1}]
        async with api_client() as client:
            response = await client.post("/api/simulations/round", json={
                "championship": championship_payload(teams), "matches": matches, "round": 1
            })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_full_league(self, team_payloads):
        """Test generating and playing a whole league in one call."""
        async with api_client() as client:
            response = await client.post("/api/simulations/championship", json={
                "championship": championship_payload(team_payloads(6)), "seed": 3
            })

        data = response.json()
        assert response.status_code == 200
        assert len(data["matches"]) == 30
        assert all(m["status"] == "finished" for m in data["matches"])
        assert data["champion_id"] == data["standings"][0]["team_id"]

    @pytest.mark.asyncio
    async def test_full_cup(self, team_payloads):
        """Test drawing and playing a whole cup in one call."""
        async with api_client() as client:
            response = await client.post("/api/simulations/championship", json={
                "championship": championship_payload(team_payloads(16), "cup"), "seed": 8
            })

        data = response.json()
        assert response.status_code == 200
        assert len(data["groups"]) == 4
        final = next(m for m in data["matches"] if m["id"] == "ko-final-1")
        assert final["status"] == "finished"
        assert data["champion_id"] in (final["home_team_id"], final["away_team_id"])
        # Four groups of four: only the three group matches count
        assert len(data["standings"]) == 16
        assert all(row["played"] == 3 for row in data["standings"])
