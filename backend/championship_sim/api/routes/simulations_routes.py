"""
Simulation API routes.

Every request carries the whole competition state; nothing is stored
between calls. Pass ``seed`` for reproducible results.
"""

import logging
from fastapi import APIRouter

from ..dependencies import build_config, build_rng, domain_errors
from ..schemas import (
    ChampionshipSimulationRequest,
    ChampionshipSimulationResponse,
    CupPhaseRequest,
    GroupSchema,
    MatchesResponse,
    MatchResultSchema,
    MatchSchema,
    MatchSimulationRequest,
    MatchSimulationResponse,
    NextPhaseRequest,
    PenaltyScoreSchema,
    RoundSimulationRequest,
    StandingEntrySchema,
)
from ...core.football import ChampionshipType, Phase
from ...simulator import (
    CupConfig,
    calculate_standings,
    generate_cup_fixture,
    generate_league_fixture,
    get_champion,
    prepare_next_phase,
    simulate_championship,
    simulate_copa_phase,
    simulate_match,
    simulate_penalty_shootout,
    simulate_round,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulations", tags=["simulations"])


def _matches_response(matches) -> MatchesResponse:
    return MatchesResponse(matches=[MatchSchema.from_domain(m) for m in matches])


@router.post("/match", response_model=MatchSimulationResponse)
async def run_match(request: MatchSimulationRequest) -> MatchSimulationResponse:
    """
    Simulate a single match between two teams.

    With ``knockout`` set, a draw is settled by a penalty shootout.
    """
    with domain_errors():
        config = build_config(request.config_overrides)
        rng = build_rng(request.seed)
        result = simulate_match(request.home.to_domain(), request.away.to_domain(), request.round, config, rng)
        penalties = None
        if request.knockout and result.home_score == result.away_score:
            penalties = simulate_penalty_shootout(config, rng)

    return MatchSimulationResponse(
        home_team_id=request.home.id,
        away_team_id=request.away.id,
        result=MatchResultSchema.model_validate(result.to_dict()),
        penalty_score=PenaltyScoreSchema.model_validate(penalties.to_dict()) if penalties else None
    )


@router.post("/round", response_model=MatchesResponse)
async def run_round(request: RoundSimulationRequest) -> MatchesResponse:
    """Simulate every scheduled match of one league round."""
    with domain_errors():
        matches = simulate_round(
            request.championship.to_domain(),
            [m.to_domain() for m in request.matches],
            request.round,
            build_config(request.config_overrides),
            build_rng(request.seed)
        )
    return _matches_response(matches)


@router.post("/cup/phase", response_model=MatchesResponse)
async def run_cup_phase(request: CupPhaseRequest) -> MatchesResponse:
    """
    Simulate the next batch of a cup phase.

    For the group stage this is the next round; for a knockout phase every
    match whose teams are known.
    """
    with domain_errors():
        matches = simulate_copa_phase(
            request.championship.to_domain(),
            [m.to_domain() for m in request.matches],
            request.phase,
            build_config(request.config_overrides),
            build_rng(request.seed)
        )
    return _matches_response(matches)


@router.post("/cup/next-phase", response_model=MatchesResponse)
async def run_next_phase(request: NextPhaseRequest) -> MatchesResponse:
    """Seed or advance teams into the next phase once results are in."""
    with domain_errors():
        matches = prepare_next_phase(
            request.championship.to_domain(),
            [m.to_domain() for m in request.matches],
            request.current_phase,
            request.next_phase,
            build_config(request.config_overrides),
            build_rng(request.seed)
        )
    return _matches_response(matches)


@router.post("/championship", response_model=ChampionshipSimulationResponse)
async def run_championship(request: ChampionshipSimulationRequest) -> ChampionshipSimulationResponse:
    """
    Play a competition to the end and report the champion.

    Without ``matches`` a fresh fixture is generated from the championship's
    teams and settings first.
    """
    championship = request.championship.to_domain()

    with domain_errors():
        config = build_config(request.config_overrides)
        rng = build_rng(request.seed)

        if request.matches is not None:
            matches = [m.to_domain() for m in request.matches]
        elif championship.type == ChampionshipType.LEAGUE:
            matches = generate_league_fixture(championship.teams, championship.settings.double_legs)
        else:
            fixture = generate_cup_fixture(
                championship.teams,
                has_third_place=championship.settings.has_third_place,
                config=CupConfig.from_settings(championship.settings),
                custom_groups=championship.custom_groups
            )
            championship.groups = fixture.groups
            matches = fixture.matches

        logger.info(f"Simulating championship {championship.id} ({len(matches)} matches)")
        played = simulate_championship(championship, matches, config, rng)
        if championship.type == ChampionshipType.CUP:
            # Knockout results never count toward points
            table = calculate_standings(
                championship.teams, [m for m in played if m.phase == Phase.GROUPS], championship.settings
            )
        else:
            table = calculate_standings(championship.teams, played, championship.settings)
        champion = get_champion(championship, played)

    return ChampionshipSimulationResponse(
        matches=[MatchSchema.from_domain(m) for m in played],
        groups=[GroupSchema.model_validate(g.to_dict()) for g in championship.groups] if championship.groups else None,
        standings=[StandingEntrySchema.model_validate(e.to_dict()) for e in table],
        champion_id=champion
    )
