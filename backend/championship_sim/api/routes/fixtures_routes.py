"""
Fixture generation API routes.
"""

from fastapi import APIRouter

from ..dependencies import domain_errors
from ..schemas import (
    CupFixtureRequest,
    CupFixtureResponse,
    CupStructureRequest,
    CupStructureSchema,
    LeagueFixtureRequest,
    LeagueFixtureResponse,
    MatchSchema,
)
from ...simulator import calculate_cup_structure, generate_cup_fixture, generate_league_fixture


router = APIRouter(prefix="/fixtures", tags=["fixtures"])


@router.post("/league", response_model=LeagueFixtureResponse)
async def create_league_fixture(request: LeagueFixtureRequest) -> LeagueFixtureResponse:
    """
    Generate a round-robin league fixture.

    Needs an even number of teams.
    """
    with domain_errors():
        matches = generate_league_fixture(
            [t.to_domain() for t in request.teams],
            double_leg=request.double_leg
        )

    return LeagueFixtureResponse(
        matches=[MatchSchema.from_domain(m) for m in matches],
        rounds=max((m.round for m in matches), default=0)
    )


@router.post("/cup/structure", response_model=CupStructureSchema)
async def create_cup_structure(request: CupStructureRequest) -> CupStructureSchema:
    """Preview the groups and knockout depth a cup would get."""
    with domain_errors():
        structure = calculate_cup_structure(
            [t.to_domain() for t in request.teams],
            request.config.to_domain()
        )
    return CupStructureSchema.model_validate(structure.to_dict())


@router.post("/cup", response_model=CupFixtureResponse)
async def create_cup_fixture(request: CupFixtureRequest) -> CupFixtureResponse:
    """
    Draw a cup: groups, group-stage matches and an empty knockout bracket.
    """
    custom_groups = [g.to_domain() for g in request.custom_groups] if request.custom_groups else None

    with domain_errors():
        fixture = generate_cup_fixture(
            [t.to_domain() for t in request.teams],
            has_third_place=request.has_third_place,
            config=request.config.to_domain(),
            custom_groups=custom_groups
        )

    return CupFixtureResponse.model_validate(fixture.to_dict())
